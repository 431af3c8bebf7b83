from decimal import Decimal

import pytest
from pydantic import ValidationError

from quickbill.core.config import Settings


def test_default_tax_rate_fits_the_stored_column():
    assert Settings(DEFAULT_TAX_RATE="8.25").DEFAULT_TAX_RATE == Decimal("8.25")

    with pytest.raises(ValidationError):
        Settings(DEFAULT_TAX_RATE="8.125")


def test_default_tax_rate_is_a_percentage():
    with pytest.raises(ValidationError):
        Settings(DEFAULT_TAX_RATE="100.01")
