from urllib.parse import quote

# Characters encodeURIComponent leaves alone, so the app's deep-link parser sees the same bytes.
_UNRESERVED = "-_.!~*'()"

DEFAULT_SCHEME = "echallan"
DEFAULT_ERROR_CODE = "UNKNOWN"
DEFAULT_ERROR_MESSAGE = "Payment Failed"


def encode_component(value) -> str:
    return quote(str(value if value is not None else ""), safe=_UNRESERVED)


def _deep_link(scheme, outcome, params):
    query = "&".join(f"{name}={encode_component(value)}" for name, value in params)
    return f"{scheme}://payment/{outcome}?{query}"


def build_success_link(basket_id="", transaction_id="", scheme=DEFAULT_SCHEME) -> str:
    return _deep_link(scheme, "success", [
        ("basket_id", basket_id or ""),
        ("transaction_id", transaction_id or ""),
    ])


def build_failure_link(basket_id="", err_code=None, err_msg=None, scheme=DEFAULT_SCHEME) -> str:
    return _deep_link(scheme, "failure", [
        ("basket_id", basket_id or ""),
        ("err_code", err_code or DEFAULT_ERROR_CODE),
        ("err_msg", err_msg or DEFAULT_ERROR_MESSAGE),
    ])
