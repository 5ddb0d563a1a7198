from services.code_store import AccessCodeStore
from services.session_store import DeviceSessionStore
from utils.errors import DeviceConflictError
from utils.logger_factory import new_logger


class VerificationService:
    """Decides whether an access code is valid and may be used from a device"""

    def __init__(self, code_store: AccessCodeStore, session_store: DeviceSessionStore):
        self.code_store = code_store
        self.session_store = session_store

    def verify(self, code: str, device_id: str) -> bool:
        """
        Check `code` against the whitelist and bind it to `device_id`.

        Returns False for an unknown code (no session is created). Returns
        True after binding or refreshing the session for this device.

        The session read and the upsert are not atomic: two devices verifying
        the same code at the same moment can both pass the conflict check,
        and the later upsert wins.

        Raises:
            DeviceConflictError: the code is bound to a different device
        """
        log = new_logger("verify_code")
        stored_code = self.code_store.find_by_plaintext(code)
        if not stored_code:
            log.info(f"Unknown access code presented by device {device_id}")
            return False

        existing_session = self.session_store.find_by_code(code)
        if existing_session and existing_session.device_id != device_id:
            log.warning(
                f"Device {device_id} refused, code {stored_code.id} is bound to device {existing_session.device_id}"
            )
            raise DeviceConflictError(code, existing_session.device_id)

        self.session_store.upsert(code, device_id)
        log.info(f"Access code {stored_code.id} verified for device {device_id}")
        return True

    def logout(self, code: str) -> bool:
        """Drop the session for `code`. Any caller knowing the code may do this."""
        return self.session_store.delete_by_code(code)
