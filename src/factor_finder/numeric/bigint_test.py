import pytest

from factor_finder.errors import DomainError, ErrorKind, ParseError
from factor_finder.numeric.bigint import digit_count, parse_bigint, power, tdiv, tmod, to_decimal


class TestParseBigint:
    """Test suite for decimal parsing"""

    def test_plain_digits(self):
        """Test parsing a plain decimal string"""
        assert parse_bigint("1729") == 1729

    def test_sign_and_whitespace(self):
        """Test that signs and surrounding whitespace are accepted"""
        assert parse_bigint("  -42 ") == -42
        assert parse_bigint("+7") == 7

    def test_arbitrary_precision(self):
        """Test values far beyond machine words"""
        assert parse_bigint("1" + "0" * 100) == 10 ** 100

    @pytest.mark.parametrize("text", ["", "   ", "12a", "1.5", "1_000", "0x10", "1e3", "--1"])
    def test_rejects_non_decimal(self, text):
        """Test that anything but a decimal integer is a ParseError"""
        with pytest.raises(ParseError):
            parse_bigint(text)

    def test_error_names_field(self):
        """Test that the error carries the field name and parse kind"""
        with pytest.raises(ParseError, match="base") as excinfo:
            parse_bigint("ten", field="base")
        assert excinfo.value.field == "base"
        assert excinfo.value.kind == ErrorKind.PARSE

    def test_rejects_non_string(self):
        """Test that non-string input is a ParseError"""
        with pytest.raises(ParseError, match="expected a decimal string"):
            parse_bigint(None)

    def test_beyond_default_conversion_limit(self):
        """Test parsing a number with more digits than the interpreter allows by default"""
        assert parse_bigint("1" + "0" * 5000) == 10 ** 5000


class TestArithmetic:
    """Test suite for power and truncating division"""

    def test_power(self):
        """Test plain exponentiation"""
        assert power(10, 3) == 1000
        assert power(-2, 3) == -8
        assert power(7, 0) == 1

    def test_power_negative_exponent(self):
        """Test that negative exponents are a DomainError"""
        with pytest.raises(DomainError, match="exponent"):
            power(2, -1)

    def test_truncating_division(self):
        """Test that division truncates toward zero and remainder follows the dividend"""
        assert (tdiv(7, 2), tmod(7, 2)) == (3, 1)
        assert (tdiv(-7, 2), tmod(-7, 2)) == (-3, -1)
        assert (tdiv(7, -2), tmod(7, -2)) == (-3, 1)
        assert (tdiv(-7, -2), tmod(-7, -2)) == (3, -1)

    def test_division_identity(self):
        """Test tdiv(a, b) * b + tmod(a, b) == a with |tmod| < |b|"""
        for a in range(-30, 31):
            for b in [-7, -3, -1, 1, 2, 5]:
                assert tdiv(a, b) * b + tmod(a, b) == a
                assert abs(tmod(a, b)) < abs(b)

    def test_division_by_zero(self):
        """Test that division by zero is a DomainError"""
        with pytest.raises(DomainError):
            tdiv(1, 0)
        with pytest.raises(DomainError):
            tmod(1, 0)


class TestDecimal:
    """Test suite for decimal rendering helpers"""

    def test_to_decimal(self):
        """Test rendering to a decimal string"""
        assert to_decimal(1729) == "1729"
        assert to_decimal(-5) == "-5"

    def test_to_decimal_large(self):
        """Test rendering a number with more than 5000 digits"""
        text = to_decimal(10 ** 5200 - 1)
        assert text == "9" * 5200

    @pytest.mark.parametrize(
        "n, digits",
        [(0, 1), (9, 1), (10, 2), (-1729, 4), (10 ** 50 - 1, 50), (10 ** 50, 51)],
    )
    def test_digit_count(self, n, digits):
        """Test counting decimal digits"""
        assert digit_count(n) == digits
