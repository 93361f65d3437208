from __future__ import annotations

import random
from datetime import date
from typing import Optional

JOB_PREFIXES = {"CNC": "CNC", "PLATING": "PLT"}


# PUBLIC_INTERFACE
def generate_document_no(prefix: str, *, today: Optional[date] = None, rng: Optional[random.Random] = None) -> str:
    """
    Build a business document number ``{prefix}-{YYYY}-{NNN}``.

    The suffix is a random 000-999 value; a collision surfaces as a unique
    constraint failure on insert.
    """
    year = (today or date.today()).year
    suffix = (rng or random).randint(0, 999)
    return f"{prefix}-{year}-{suffix:03d}"


# PUBLIC_INTERFACE
def generate_job_id(job_type: str, **kwargs) -> str:
    """Job code prefixed by job type: CNC jobs get ``CNC``, plating jobs ``PLT``."""
    return generate_document_no(JOB_PREFIXES.get(job_type, "PLT"), **kwargs)


def generate_challan_no(**kwargs) -> str:
    return generate_document_no("CH", **kwargs)


def generate_invoice_no(**kwargs) -> str:
    return generate_document_no("INV", **kwargs)
