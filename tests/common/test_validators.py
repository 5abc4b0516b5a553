from __future__ import annotations

import pytest

from src.mice_attendance.mice_attendance.common.validators import require_email
from src.mice_attendance.mice_attendance.core.exceptions import ValidationError


@pytest.mark.parametrize("value", ["Ana.Reyes@Example.com", "a@b.co", "guest+mice@sub.example.org"])
def test_require_email_accepts_address_shapes(value):
    assert require_email(f"  {value} ") == value.lower()


@pytest.mark.parametrize("value", ["", "ana", "ana@", "ana@example", "a b@example.com", "a@@example.com"])
def test_require_email_rejects_malformed(value):
    with pytest.raises(ValidationError):
        require_email(value)
