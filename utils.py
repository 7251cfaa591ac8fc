import shlex

QUEUE_LETTERS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"


def escape(value, enabled: bool = True) -> str:
    value = str(value)
    if not enabled:
        return value
    return shlex.quote(value)


def queue_letter(queue: str) -> str:
    """Returns the first character of queue, which must be a letter a-zA-Z."""
    if not queue or queue[0] not in QUEUE_LETTERS:
        raise ValueError(f"Invalid queue {queue!r}: expected a letter a-z or A-Z")
    return queue[0]
