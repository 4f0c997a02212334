from types import MappingProxyType

# app metadata
APP_NAME    = "scrypt-auth"
APP_VERSION = "1.0.0"

# supported hashing algorithms (wire identifiers)
SCRYPT_ALGORITHM     = "scrypt"
SUPPORTED_ALGORITHMS = (SCRYPT_ALGORITHM,)

# random material sizes (bytes)
SALT_LEN       = 32
FORM_TOKEN_LEN = 16

# scrypt parameter bounds
SCRYPT_MIN_N     = 2 ** 10
SCRYPT_MAX_N     = 2 ** 24
SCRYPT_MIN_R     = 1
SCRYPT_MAX_R     = 64
SCRYPT_MIN_P     = 1
SCRYPT_MAX_P     = 64
SCRYPT_MIN_DKLEN = 16
SCRYPT_MAX_DKLEN = 128

# memory ceiling (bytes); scrypt working set is approximated as 128 * N * r
SCRYPT_BLOCK_UNIT       = 128
SCRYPT_MAX_MEMORY_BYTES = 1024 * 1024 * 1024

# security levels, ordered weakest to strongest
SECURITY_LEVEL_DEVELOPMENT = "development"
SECURITY_LEVEL_STANDARD    = "standard"
SECURITY_LEVEL_HIGH        = "high"
SECURITY_LEVEL_PARANOID    = "paranoid"

DEFAULT_SECURITY_LEVEL = SECURITY_LEVEL_STANDARD

# (N, r, p, dkLen) per security level. Never mutated after import.
SCRYPT_PRESETS = MappingProxyType({
    SECURITY_LEVEL_DEVELOPMENT: (2 ** 14, 8, 1, 32),   # ~50ms
    SECURITY_LEVEL_STANDARD:    (2 ** 16, 8, 1, 32),   # ~200ms
    SECURITY_LEVEL_HIGH:        (2 ** 18, 8, 1, 32),   # ~800ms
    SECURITY_LEVEL_PARANOID:    (2 ** 20, 8, 1, 32),   # ~3200ms
})

# timing estimate baseline: N=2^16, r=8, p=1 takes roughly 200ms
ESTIMATE_BASE_TIME_MS = 200
ESTIMATE_BASE_N       = 2 ** 16
ESTIMATE_BASE_R       = 8
