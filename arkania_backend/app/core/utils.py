from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def utc_now_naive() -> datetime:
    """Hora UTC sin tzinfo, tal como se guarda en columnas DateTime"""
    return utc_now().replace(tzinfo=None)
