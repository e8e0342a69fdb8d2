from ghost_protocol.analysis.factory import AnalyzerFactory
from ghost_protocol.chain.base import BaseChainClient
from ghost_protocol.chain.factory import ChainClientFactory
from ghost_protocol.config.settings import Settings
from ghost_protocol.registration.confirmation import ConfirmationWaiter
from ghost_protocol.registration.orchestrator import RegistrationSession
from ghost_protocol.registration.submission import RegistrationSubmitter
from ghost_protocol.session.store import SessionStore
from ghost_protocol.storage.factory import StorageFactory


class RegistrationSessionFactory:
    """Wires a RegistrationSession from settings."""

    @classmethod
    def create(
        cls,
        settings: Settings,
        chain: BaseChainClient | None = None,
    ) -> RegistrationSession:
        chain = chain or ChainClientFactory.create(settings)
        waiter = ConfirmationWaiter(
            chain.get_receipt,
            timeout_seconds=settings.confirmation_timeout_seconds,
            poll_interval_seconds=settings.confirmation_poll_interval_seconds,
        )
        submitter = RegistrationSubmitter(
            chain,
            waiter,
            gas_limit=settings.registration_gas_limit,
            explorer_url=settings.chain_explorer_url,
        )
        return RegistrationSession(
            storage=StorageFactory.create(settings),
            analyzer=AnalyzerFactory.create(settings),
            chain=chain,
            submitter=submitter,
            session_store=SessionStore(settings.session_store_path),
        )
