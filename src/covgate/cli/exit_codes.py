# mirror <sysexits.h> where a code exists
EXIT_OK = 0  # Gate passed
EXIT_GENERIC = 1  # Generic failure (fallback)
EXIT_UNSTABLE = 2  # A coverage target was not met
EXIT_MISMATCH = 3  # A target names a metric the report does not carry
EXIT_DATAERR = 65  # Report data was invalid (malformed HTML, bad ratio)
EXIT_NOINPUT = 66  # Report not found
EXIT_CONFIG = 78  # Invalid configuration
