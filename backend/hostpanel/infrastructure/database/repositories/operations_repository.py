"""SQLAlchemy repositories for backups, certificates, cron jobs and API tokens."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hostpanel.application.interfaces import (
    ApiTokenRepository,
    BackupRepository,
    CertificateRepository,
    CronJobRepository,
)
from hostpanel.domain.entities import (
    ApiToken,
    Backup,
    BackupStatus,
    BackupType,
    Certificate,
    CertificateMethod,
    CertificateStatus,
    CronJob,
    CronStatus,
)
from hostpanel.infrastructure.database.models import (
    ApiTokenModel,
    BackupModel,
    CertificateModel,
    CronJobModel,
)


class SQLAlchemyBackupRepository(BackupRepository):

    def __init__(self, session: AsyncSession):
        self._session = session

    @staticmethod
    def _to_entity(model: BackupModel) -> Backup:
        return Backup(
            id=model.id,
            name=model.name,
            backup_type=BackupType(model.backup_type),
            status=BackupStatus(model.status),
            size_bytes=model.size_bytes,
            file_path=model.file_path,
            error_message=model.error_message,
            created_at=model.created_at,
            completed_at=model.completed_at,
        )

    async def get_by_id(self, backup_id: str) -> Backup | None:
        model = await self._session.get(BackupModel, backup_id)
        return self._to_entity(model) if model else None

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[Backup]:
        result = await self._session.execute(
            select(BackupModel)
            .order_by(BackupModel.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def create(self, backup: Backup) -> Backup:
        model = BackupModel(
            id=backup.id,
            name=backup.name,
            backup_type=backup.backup_type.value,
            status=backup.status.value,
            size_bytes=backup.size_bytes,
            file_path=backup.file_path,
            error_message=backup.error_message,
            created_at=backup.created_at,
            completed_at=backup.completed_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def update(self, backup: Backup) -> Backup:
        model = await self._session.get(BackupModel, backup.id)
        if model is None:
            raise ValueError(f"Backup {backup.id} not found in database")
        model.status = backup.status.value
        model.size_bytes = backup.size_bytes
        model.file_path = backup.file_path
        model.error_message = backup.error_message
        model.completed_at = backup.completed_at
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, backup_id: str) -> bool:
        model = await self._session.get(BackupModel, backup_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True


class SQLAlchemyCertificateRepository(CertificateRepository):

    def __init__(self, session: AsyncSession):
        self._session = session

    @staticmethod
    def _to_entity(model: CertificateModel) -> Certificate:
        return Certificate(
            id=model.id,
            domain=model.domain,
            method=CertificateMethod(model.method),
            issuer=model.issuer,
            status=CertificateStatus(model.status),
            auto_renew=model.auto_renew,
            expires_at=model.expires_at,
            error_message=model.error_message,
            created_at=model.created_at,
        )

    async def get_by_id(self, certificate_id: str) -> Certificate | None:
        model = await self._session.get(CertificateModel, certificate_id)
        return self._to_entity(model) if model else None

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[Certificate]:
        result = await self._session.execute(
            select(CertificateModel)
            .order_by(CertificateModel.domain.asc(), CertificateModel.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def create(self, certificate: Certificate) -> Certificate:
        model = CertificateModel(
            id=certificate.id,
            domain=certificate.domain,
            method=certificate.method.value,
            issuer=certificate.issuer,
            status=certificate.status.value,
            auto_renew=certificate.auto_renew,
            expires_at=certificate.expires_at,
            error_message=certificate.error_message,
            created_at=certificate.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def update(self, certificate: Certificate) -> Certificate:
        model = await self._session.get(CertificateModel, certificate.id)
        if model is None:
            raise ValueError(f"Certificate {certificate.id} not found in database")
        model.status = certificate.status.value
        model.auto_renew = certificate.auto_renew
        model.expires_at = certificate.expires_at
        model.error_message = certificate.error_message
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, certificate_id: str) -> bool:
        model = await self._session.get(CertificateModel, certificate_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True


class SQLAlchemyCronJobRepository(CronJobRepository):

    def __init__(self, session: AsyncSession):
        self._session = session

    @staticmethod
    def _to_entity(model: CronJobModel) -> CronJob:
        return CronJob(
            id=model.id,
            name=model.name,
            command=model.command,
            schedule=model.schedule,
            status=CronStatus(model.status),
            last_run=model.last_run,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    async def get_by_id(self, job_id: str) -> CronJob | None:
        model = await self._session.get(CronJobModel, job_id)
        return self._to_entity(model) if model else None

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[CronJob]:
        result = await self._session.execute(
            select(CronJobModel)
            .order_by(CronJobModel.created_at.asc())
            .offset(skip)
            .limit(limit)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def create(self, job: CronJob) -> CronJob:
        model = CronJobModel(
            id=job.id,
            name=job.name,
            command=job.command,
            schedule=job.schedule,
            status=job.status.value,
            last_run=job.last_run,
            created_at=job.created_at,
            updated_at=job.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def update(self, job: CronJob) -> CronJob:
        model = await self._session.get(CronJobModel, job.id)
        if model is None:
            raise ValueError(f"CronJob {job.id} not found in database")
        model.name = job.name
        model.command = job.command
        model.schedule = job.schedule
        model.status = job.status.value
        model.last_run = job.last_run
        model.updated_at = job.updated_at
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, job_id: str) -> bool:
        model = await self._session.get(CronJobModel, job_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True


class SQLAlchemyApiTokenRepository(ApiTokenRepository):

    def __init__(self, session: AsyncSession):
        self._session = session

    @staticmethod
    def _to_entity(model: ApiTokenModel) -> ApiToken:
        return ApiToken(
            id=model.id,
            name=model.name,
            token_hash=model.token_hash,
            token_hint=model.token_hint,
            permissions=list(model.permissions or []),
            created_at=model.created_at,
            last_used=model.last_used,
        )

    async def get_by_id(self, token_id: str) -> ApiToken | None:
        model = await self._session.get(ApiTokenModel, token_id)
        return self._to_entity(model) if model else None

    async def get_by_hash(self, token_hash: str) -> ApiToken | None:
        result = await self._session.execute(
            select(ApiTokenModel).where(ApiTokenModel.token_hash == token_hash)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all(self) -> list[ApiToken]:
        result = await self._session.execute(
            select(ApiTokenModel).order_by(ApiTokenModel.created_at.desc())
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def create(self, token: ApiToken) -> ApiToken:
        model = ApiTokenModel(
            id=token.id,
            name=token.name,
            token_hash=token.token_hash,
            token_hint=token.token_hint,
            permissions=list(token.permissions),
            created_at=token.created_at,
            last_used=token.last_used,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def update(self, token: ApiToken) -> ApiToken:
        model = await self._session.get(ApiTokenModel, token.id)
        if model is None:
            raise ValueError(f"ApiToken {token.id} not found in database")
        model.last_used = token.last_used
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, token_id: str) -> bool:
        model = await self._session.get(ApiTokenModel, token_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True
