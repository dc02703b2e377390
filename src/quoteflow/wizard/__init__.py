"""Wizard package."""

from quoteflow.wizard.flow import CLOSE, PREVIOUS, QuoteWizard
from quoteflow.wizard.schema import ChoiceOption, FieldSchema, StepSchema, parse_steps
from quoteflow.wizard.state import WizardState
from quoteflow.wizard.steps import load_quote_steps
from quoteflow.wizard.validation import validate_step

__all__ = [
    "CLOSE",
    "PREVIOUS",
    "ChoiceOption",
    "FieldSchema",
    "QuoteWizard",
    "StepSchema",
    "WizardState",
    "load_quote_steps",
    "parse_steps",
    "validate_step",
]
