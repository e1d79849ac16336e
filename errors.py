class SecretSharingError(ValueError):
    pass

class ConfigurationError(SecretSharingError):
    pass

class ShareCountError(SecretSharingError):
    pass

class ShareIndexError(SecretSharingError):
    pass

class DuplicateIndexError(SecretSharingError):
    pass

class CommitmentLengthError(SecretSharingError):
    pass

class RandomSourceError(RuntimeError):
    pass

class ScalarError(SecretSharingError):
    pass
