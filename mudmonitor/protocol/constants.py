IAC = 255
DONT = 254
DO = 253
WONT = 252
WILL = 251
SB = 250
SE = 240

MSSP = 70
MSSP_VAR = 1
MSSP_VAL = 2

MSSP_QUERY = bytes([IAC, DO, MSSP])

PLAINTEXT_REQUEST = b"MSSP-REQUEST\r\n"
PLAINTEXT_REPLY_START = "MSSP-REPLY-START"
PLAINTEXT_REPLY_END = "MSSP-REPLY-END"

DEFAULT_MAX_RESPONSE_BYTES = 64 * 1024
READ_CHUNK_SIZE = 4096

PROTOCOL_FLAGS = (
    "ANSI",
    "UTF-8",
    "MXP",
    "MCCP",
    "MSP",
    "SSL",
    "GMCP",
    "MSDP",
)
