from .client import StatusProtocolClient as StatusProtocolClient
from .models import (
    ProbeErrorKind as ProbeErrorKind,
    ProbeMode as ProbeMode,
    StatusData as StatusData,
    StatusProbeResult as StatusProbeResult,
)
from .parser import (
    parse_mssp_subnegotiation as parse_mssp_subnegotiation,
    parse_plaintext_reply as parse_plaintext_reply,
    scan_telnet_response as scan_telnet_response,
)
