from redis.exceptions import ResponseError

ADAPTEE = "fakeredis"

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 6379

# Reply errors raised by the store are the real client's response errors
ReplyError = ResponseError

MOVED_ERROR_PREFIX = "MOVED "

CLIENT_EVENTS: tuple[str, ...] = ("connect", "ready", "reconnecting", "error", "clientError", "end", "close")
