# schemas/questions.py
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class QuestionType(str, Enum):
    # Whole number operations
    Addition = "Addition"
    Subtraction = "Subtraction"
    SubtractionWithRegrouping = "Subtraction (from multiples of 100/1000)"
    Multiplication = "Multiplication (by 1 digit)"
    LongMultiplication = "Long Multiplication (by 2 digits)"
    Multiplication3Numbers = "Multiplication (3 numbers)"
    Division = "Division (by 1 digit)"
    LongDivision = "Long Division (by 2 digits)"
    DivisionWithKnownFacts = "Division (using known facts)"
    BIDMAS = "Order of Operations (BIDMAS)"

    # Place value, powers of 10, indices
    PlaceValue = "Place Value Partitioning"
    MultiplyBy10_100_1000 = "Multiply by 10, 100, 1000"
    DivideBy10_100_1000 = "Divide by 10, 100, 1000"
    PowersIndices = "Powers/Indices (Squares & Cubes)"

    # Decimals
    DecimalAddition = "Decimal Addition (varying places)"
    DecimalSubtraction = "Decimal Subtraction (varying places)"
    DecimalMultiplication = "Decimal Multiplication (by whole number)"
    DecimalMultiplication2Digit = "Decimal Multiplication (by 2 digits)"

    # Fractions
    FractionAdditionSimpleDenominators = "Fraction Addition (simple denominators)"
    FractionAdditionUnlikeDenominators = "Fraction Addition (unlike denominators)"
    FractionAdditionMixedNumbers = "Fraction Addition (mixed numbers)"
    FractionSubtractionSimpleDenominators = "Fraction Subtraction (simple denominators)"
    FractionSubtractionUnlikeDenominators = "Fraction Subtraction (unlike denominators)"
    FractionSubtractionMixedNumbers = "Fraction Subtraction (mixed numbers)"
    FractionMultiplication = "Fraction Multiplication"
    FractionMultiplicationMixedNumbers = "Fraction Multiplication (mixed numbers)"
    FractionMultiplication2Digit = "Fraction Multiplication (mixed number by 2 digits)"
    FractionDivision = "Fraction Division (by whole number)"
    FractionsOfAmounts = "Fractions of Amounts"

    # Percentages
    Percentages = "Percentages of Amounts"


class BidmasStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    expression: str
    # the part being calculated, e.g. "( 10 + 2 )"
    active_expression: str
    operation: str
    operands: List[str]
    result: str


class BidmasMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    operations: List[str]
    execution_steps: List[BidmasStep]
    has_brackets: bool
    has_indices: bool


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: QuestionType
    text: str
    answer: str
    operands: Optional[List[str]] = None
    operator: Optional[str] = None
    bidmas_metadata: Optional[BidmasMetadata] = None


class TestQuestion(Question):
    """A question fixed to one slot of a generated paper."""

    __test__ = False  # not a pytest class

    question_id: str
    slot_number: int = Field(ge=1, le=36)
    mark_value: int = Field(ge=1, le=2)
    constraint_flags: List[str] = Field(default_factory=list)


class QuestionTypeOut(BaseModel):
    name: str
    label: str
