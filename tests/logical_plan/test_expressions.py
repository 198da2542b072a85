"""
Tests for planwright.logical_plan.expressions module.

Covers:
- BinaryOp and AggFunc enums
- Expr AST nodes (Col, LiteralString, LiteralInt, BooleanExpr, MathExpr, Aggregation)
- Field derivation against an input plan
- Convenience constructor functions
"""

import pytest

from planwright.logical_plan import DType, Field, Scan, UnknownColumnError
from planwright.logical_plan.expressions import (
    # Enums
    AggFunc,
    BinaryOp,
    # AST nodes
    Aggregation,
    BinaryExpr,
    BooleanExpr,
    Col,
    LiteralInt,
    LiteralString,
    MathExpr,
    # Convenience constructors
    add,
    and_,
    avg,
    col,
    divide,
    eq,
    gt,
    gteq,
    lit,
    lt,
    lteq,
    max_,
    min_,
    modulus,
    multiply,
    neq,
    or_,
    subtract,
    sum_,
)


class TestBinaryOp:
    """Tests for the BinaryOp enum."""

    def test_boolean_operators(self) -> None:
        """Test classification of boolean operators."""
        for op in (BinaryOp.EQ, BinaryOp.NEQ, BinaryOp.GT, BinaryOp.LT,
                   BinaryOp.GTEQ, BinaryOp.LTEQ, BinaryOp.AND, BinaryOp.OR):
            assert op.is_boolean()
            assert not op.is_math()

    def test_math_operators(self) -> None:
        """Test classification of math operators."""
        for op in (BinaryOp.ADD, BinaryOp.SUBTRACT, BinaryOp.MULTIPLY, BinaryOp.DIVIDE, BinaryOp.MODULUS):
            assert op.is_math()
            assert not op.is_boolean()

    def test_symbols(self) -> None:
        """Test symbol() method returns correct symbols."""
        assert BinaryOp.EQ.symbol() == "="
        assert BinaryOp.NEQ.symbol() == "!="
        assert BinaryOp.GT.symbol() == ">"
        assert BinaryOp.LT.symbol() == "<"
        assert BinaryOp.GTEQ.symbol() == ">="
        assert BinaryOp.LTEQ.symbol() == "<="
        assert BinaryOp.AND.symbol() == "AND"
        assert BinaryOp.OR.symbol() == "OR"
        assert BinaryOp.ADD.symbol() == "+"
        assert BinaryOp.SUBTRACT.symbol() == "-"
        assert BinaryOp.MULTIPLY.symbol() == "*"
        assert BinaryOp.DIVIDE.symbol() == "/"
        assert BinaryOp.MODULUS.symbol() == "%"

    def test_field_names(self) -> None:
        """Test the names of the fields each operator produces."""
        assert BinaryOp.EQ.field_name() == "eq"
        assert BinaryOp.GTEQ.field_name() == "gteq"
        assert BinaryOp.AND.field_name() == "and"
        assert BinaryOp.MULTIPLY.field_name() == "mult"
        assert BinaryOp.DIVIDE.field_name() == "div"
        assert BinaryOp.MODULUS.field_name() == "modulus"


class TestAggFunc:
    """Tests for the AggFunc enum."""

    def test_name_lower(self) -> None:
        """Test lowercase function names."""
        assert AggFunc.SUM.name_lower() == "sum"
        assert AggFunc.MIN.name_lower() == "min"
        assert AggFunc.MAX.name_lower() == "max"
        assert AggFunc.AVG.name_lower() == "avg"


class TestCol:
    """Tests for column references."""

    def test_to_string(self) -> None:
        """Test that a column displays as its bare name."""
        assert Col("column1").to_string() == "column1"
        assert str(Col("column1")) == "column1"

    def test_to_field_returns_input_field(self, scan: Scan) -> None:
        """Test that the matched field is returned unchanged."""
        assert Col("column2").to_field(scan) == Field("column2", DType.INT64, False)

    def test_to_field_unknown(self, scan: Scan) -> None:
        """Test that an unknown column raises UnknownColumnError."""
        with pytest.raises(UnknownColumnError):
            Col("nope").to_field(scan)

    def test_children_and_columns(self) -> None:
        """Test that a column is a leaf referencing itself."""
        assert Col("a").children() == ()
        assert Col("a").collect_columns() == frozenset({"a"})


class TestLiterals:
    """Tests for literal expressions."""

    def test_string_to_string(self) -> None:
        """Test that string literals are quoted."""
        assert LiteralString("abc").to_string() == "'abc'"

    def test_int_to_string(self) -> None:
        """Test that integer literals display as digits."""
        assert LiteralInt(123).to_string() == "123"
        assert LiteralInt(-5).to_string() == "-5"

    def test_string_field_named_after_value(self, scan: Scan) -> None:
        """Test the field synthesized for a string literal."""
        assert LiteralString("abc").to_field(scan) == Field("abc", DType.UTF8, False)

    def test_int_field_named_after_value(self, scan: Scan) -> None:
        """Test the field synthesized for an integer literal."""
        assert LiteralInt(42).to_field(scan) == Field("42", DType.INT64, False)

    def test_literals_are_leaves(self) -> None:
        """Test that literals have no children or column references."""
        assert LiteralInt(1).children() == ()
        assert LiteralString("x").collect_columns() == frozenset()

    def test_int_accepts_int64_bounds(self) -> None:
        """Test that the extreme int64 values are valid literals."""
        assert LiteralInt(2**63 - 1).to_string() == "9223372036854775807"
        assert LiteralInt(-(2**63)).to_string() == "-9223372036854775808"

    def test_int_out_of_range(self) -> None:
        """Test that integers wider than int64 are rejected."""
        with pytest.raises(ValueError, match="out of int64 range"):
            LiteralInt(2**63)
        with pytest.raises(ValueError, match="out of int64 range"):
            LiteralInt(-(2**63) - 1)


class TestBooleanExpr:
    """Tests for boolean binary expressions."""

    def test_to_string_has_no_spaces(self) -> None:
        """Test that boolean expressions render without spaces."""
        assert eq(col("column1"), lit(123)).to_string() == "column1=123"
        assert neq(col("a"), lit("x")).to_string() == "a!='x'"
        assert gteq(col("a"), col("b")).to_string() == "a>=b"

    def test_and_or_render_keywords(self) -> None:
        """Test that AND/OR render their keyword."""
        expr = and_(gt(col("a"), lit(1)), lt(col("b"), lit(2)))
        assert expr.to_string() == "a>1ANDb<2"
        assert or_(col("a"), col("b")).to_string() == "aORb"

    def test_to_field(self, scan: Scan) -> None:
        """Test that the derived field is a boolean named after the operator."""
        assert eq(col("column1"), lit(123)).to_field(scan) == Field("eq", DType.BOOLEAN, False)
        assert lteq(col("column1"), lit(1)).to_field(scan).name == "lteq"

    def test_to_field_resolves_operands(self, scan: Scan) -> None:
        """Test that unknown columns inside the predicate are reported."""
        with pytest.raises(UnknownColumnError):
            eq(col("nope"), lit(1)).to_field(scan)

    def test_right_operand_resolved(self, scan: Scan) -> None:
        """Test that an unknown column on the right side is reported too."""
        with pytest.raises(UnknownColumnError, match="nope"):
            gt(col("column1"), col("nope")).to_field(scan)

    def test_rejects_math_operator(self) -> None:
        """Test that a math operator cannot build a boolean expression."""
        with pytest.raises(ValueError, match="Not a boolean operator"):
            BooleanExpr(BinaryOp.ADD, col("a"), col("b"))

    def test_binary_sub_contract(self) -> None:
        """Test the shared name/operator/operand accessors."""
        expr = gt(col("a"), lit(1))
        assert isinstance(expr, BinaryExpr)
        assert expr.name() == "gt"
        assert expr.symbol() == ">"
        assert expr.left == Col("a")
        assert expr.right == LiteralInt(1)
        assert expr.children() == (Col("a"), LiteralInt(1))


class TestMathExpr:
    """Tests for math binary expressions."""

    def test_to_string_has_spaces(self) -> None:
        """Test that math expressions render with spaces."""
        assert add(col("a"), lit(1)).to_string() == "a + 1"
        assert subtract(col("a"), col("b")).to_string() == "a - b"
        assert multiply(col("a"), col("b")).to_string() == "a * b"
        assert divide(col("a"), col("b")).to_string() == "a / b"
        assert modulus(col("a"), lit(2)).to_string() == "a % 2"

    def test_type_follows_left_operand(self, scan: Scan) -> None:
        """Test that the result type is the left operand's type only."""
        expr = add(col("column1"), lit("text"))
        assert expr.to_field(scan) == Field("add", DType.INT64, False)
        expr = add(lit("text"), col("column1"))
        assert expr.to_field(scan) == Field("add", DType.UTF8, False)

    def test_field_names(self, scan: Scan) -> None:
        """Test the names of derived math fields."""
        assert multiply(col("column1"), col("column2")).to_field(scan).name == "mult"
        assert divide(col("column1"), col("column2")).to_field(scan).name == "div"

    def test_unknown_right_operand(self, scan: Scan) -> None:
        """Test that the right operand must still resolve."""
        with pytest.raises(UnknownColumnError):
            add(col("column1"), col("nope")).to_field(scan)

    def test_rejects_boolean_operator(self) -> None:
        """Test that a boolean operator cannot build a math expression."""
        with pytest.raises(ValueError, match="Not a math operator"):
            MathExpr(BinaryOp.EQ, col("a"), col("b"))

    def test_nested_collect_columns(self) -> None:
        """Test column collection through nested expressions."""
        expr = gt(add(col("a"), col("b")), multiply(col("c"), lit(2)))
        assert expr.collect_columns() == frozenset({"a", "b", "c"})


class TestAggregation:
    """Tests for aggregation expressions."""

    def test_to_string(self) -> None:
        """Test the function-call display form."""
        assert sum_(col("column3")).to_string() == "sum(column3)"
        assert avg(add(col("a"), lit(1))).to_string() == "avg(a + 1)"

    def test_to_field(self, scan: Scan) -> None:
        """Test that the field is named after the function and typed after its input."""
        assert sum_(col("column3")).to_field(scan) == Field("sum", DType.INT64, False)
        assert max_(col("column1")).to_field(scan).name == "max"
        assert min_(col("column1")).to_field(scan).name == "min"

    def test_to_field_unknown(self, scan: Scan) -> None:
        """Test that aggregating a missing column raises."""
        with pytest.raises(UnknownColumnError):
            avg(col("nope")).to_field(scan)

    def test_constructors(self) -> None:
        """Test that helpers build the right function."""
        assert sum_(col("a")) == Aggregation(AggFunc.SUM, Col("a"))
        assert min_(col("a")).func == AggFunc.MIN
        assert max_(col("a")).func == AggFunc.MAX
        assert avg(col("a")).func == AggFunc.AVG


class TestLit:
    """Tests for the lit() helper."""

    def test_int(self) -> None:
        """Test that ints become integer literals."""
        assert lit(7) == LiteralInt(7)

    def test_str(self) -> None:
        """Test that strings become string literals."""
        assert lit("abc") == LiteralString("abc")

    def test_bool_rejected(self) -> None:
        """Test that booleans are not silently treated as integers."""
        with pytest.raises(TypeError):
            lit(True)

    def test_int_out_of_range(self) -> None:
        """Test that lit() rejects integers that do not fit in int64."""
        with pytest.raises(ValueError):
            lit(2**70)

    def test_unsupported_type(self) -> None:
        """Test that unsupported types raise TypeError."""
        with pytest.raises(TypeError):
            lit(1.5)
        with pytest.raises(TypeError):
            lit(None)


class TestImmutability:
    """Tests that expressions are immutable values."""

    def test_frozen(self) -> None:
        """Test that expression attributes cannot be reassigned."""
        expr = eq(col("a"), lit(1))
        with pytest.raises(AttributeError):
            expr.left = col("b")  # type: ignore[misc]

    def test_value_equality_and_hash(self) -> None:
        """Test that structurally equal expressions are equal and hashable."""
        assert eq(col("a"), lit(1)) == eq(col("a"), lit(1))
        assert len({eq(col("a"), lit(1)), eq(col("a"), lit(1))}) == 1
