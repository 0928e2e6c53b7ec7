import uuid

LISTING = "lst"
PAYMENT = "pay"
PHONE_UNLOCK = "unl"


def gen_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


def gen_upload_name() -> str:
    # images-<hex>, unique per upload; the extension is added by the caller
    return f"images-{uuid.uuid4().hex}"
