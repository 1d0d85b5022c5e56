from ..errors import InvalidIdentifierError

SEPARATOR = "-"
MIN_SEGMENTS = 3


def parse_record_key(identifier: str) -> str:
    """
    Extract the challan number from a basket id.

    Basket ids look like ``CHALLAN-{challan_number}-{timestamp}``, and the
    challan number may itself contain hyphens::

        >>> parse_record_key("CHALLAN-CH-20251124-19981-1764448963246")
        'CH-20251124-19981'
    """
    parts = (identifier or "").split(SEPARATOR)
    if len(parts) < MIN_SEGMENTS:
        raise InvalidIdentifierError("Invalid basket ID format", payload={"basketId": identifier})

    record_key = SEPARATOR.join(parts[1:-1])
    if not record_key:
        raise InvalidIdentifierError("Invalid basket ID format", payload={"basketId": identifier})
    return record_key
