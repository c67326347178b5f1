"""Wire constants shared by the codecs."""

MAX_ID_LENGTH = 36
MAX_VISUAL_NUMBER_LENGTH = 64
MAX_ISSUER_LENGTH = 64

TIMESTAMP_PRECISION = "milliseconds"

LEGACY_TARIFF_ELEMENTS_KEY = "elements"
LEGACY_AUTH_ID_KEY = "contract_id"
