"""Application service (use case) for TLS certificates."""

import logging

from hostpanel.application.interfaces import CertificateRepository, DomainRepository
from hostpanel.application.services.job_service import PanelJobService
from hostpanel.application.services.vps_manager import VPSManager
from hostpanel.domain.entities import Certificate, CertificateMethod, JobType, PanelJob
from hostpanel.domain.entities.certificate import VALIDITY
from hostpanel.domain.exceptions import CommandExecutionError, EntityNotFoundError, VPSNotConnectedError
from hostpanel.domain.validators import ensure_domain

logger = logging.getLogger(__name__)


class CertificateService:

    def __init__(
        self,
        repository: CertificateRepository,
        jobs: PanelJobService,
        domains: DomainRepository,
    ):
        self._repository = repository
        self._jobs = jobs
        self._domains = domains

    async def get_certificate(self, certificate_id: str) -> Certificate:
        certificate = await self._repository.get_by_id(certificate_id)
        if certificate is None:
            raise EntityNotFoundError("Certificate", certificate_id)
        return certificate

    async def list_certificates(self, skip: int = 0, limit: int = 100) -> list[Certificate]:
        return await self._repository.get_all(skip=skip, limit=limit)

    async def request_certificate(
        self, domain: str, method: CertificateMethod
    ) -> tuple[Certificate, PanelJob]:
        name = ensure_domain(domain.strip())
        certificate = Certificate(
            domain=name,
            method=method,
            auto_renew=method == CertificateMethod.LETSENCRYPT,
        )
        certificate = await self._repository.create(certificate)
        job = await self._jobs.enqueue(JobType.CERTIFICATE, certificate.id, {"domain": name, "method": method.value})
        return certificate, job

    async def issue(self, certificate_id: str, vps_manager: VPSManager) -> Certificate:
        """Issue a pending certificate on the server and record the outcome.

        On success the matching hosted domain is flagged as serving TLS.
        """
        certificate = await self.get_certificate(certificate_id)
        try:
            if certificate.method == CertificateMethod.LETSENCRYPT:
                ok = await vps_manager.create_ssl_certificate(certificate.domain)
            else:
                ok = await vps_manager.create_self_signed_certificate(
                    certificate.domain, days=VALIDITY[certificate.method].days
                )
        except (VPSNotConnectedError, CommandExecutionError) as exc:
            certificate.fail(str(exc))
            return await self._repository.update(certificate)

        if not ok:
            certificate.fail(f"Certificate issuance failed for {certificate.domain}")
            return await self._repository.update(certificate)

        certificate.issue()
        certificate = await self._repository.update(certificate)

        domain = await self._domains.get_by_name(certificate.domain)
        if domain is not None:
            domain.enable_ssl()
            await self._domains.update(domain)
        logger.info("Certificate for %s issued by %s", certificate.domain, certificate.issuer)
        return certificate

    async def revoke_certificate(self, certificate_id: str) -> Certificate:
        certificate = await self.get_certificate(certificate_id)
        certificate.revoke()
        return await self._repository.update(certificate)

    async def delete_certificate(self, certificate_id: str) -> bool:
        await self.get_certificate(certificate_id)
        return await self._repository.delete(certificate_id)
