"""Exception definitions for addonpack API"""

from ..constants import ErrorCode


class AddonPackError(Exception):
    """Base exception for addonpack"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class InvalidNameError(AddonPackError):
    """Addon name contains a character outside the allowed sets"""

    def __init__(self, name: str, character: str = None):
        if character is None:
            message = f"Invalid addon name: '{name}'"
        else:
            message = f"Invalid character `{character}` in addon name '{name}'"
        super().__init__(message, ErrorCode.INVALID_NAME)
        self.name = name
        self.character = character


class LocationNotFoundError(AddonPackError):
    """Addon could not be found in any first-class location"""

    def __init__(self, name: str):
        message = f"Addon not found in addons, optionals or compats: {name}"
        super().__init__(message, ErrorCode.LOCATION_NOT_FOUND)
        self.name = name


class KeyReadFailure(AddonPackError):
    """Persisted private key exists but cannot be read"""

    def __init__(self, key_path: str, reason: str = ""):
        message = f"Failed to read private key {key_path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, ErrorCode.KEY_READ_FAILURE)
        self.key_path = key_path


class PackingFailure(AddonPackError):
    """Packer could not produce an archive"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.PACKING_FAILURE)


class SigningFailure(AddonPackError):
    """Signer could not sign an archive"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.SIGNING_FAILURE)


class IoFailure(AddonPackError):
    """Directory creation or file copy error"""

    def __init__(self, message: str, path: str = None):
        super().__init__(message, ErrorCode.IO_FAILURE)
        self.path = path


class ConfigError(AddonPackError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_FORMAT_ERROR)


class ProjectNotFoundError(AddonPackError):
    """Project root not found error"""

    def __init__(self, message: str = None):
        if message is None:
            message = (
                "No project root found. Please ensure:\n"
                "1. You are in a project directory\n"
                "2. The project root contains addonpack.yaml\n"
                "3. Or set ADDONPACK_PROJECT_ROOT to the project location"
            )
        super().__init__(message, ErrorCode.PROJECT_NOT_FOUND)


class OverlayError(AddonPackError):
    """Virtual file overlay operation error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.OVERLAY_FAILURE)
