"""
figtidy
=======

Small helpers for tidying matplotlib figures.

• format_subplots   stack one column of subplots without gaps
• increase_size     larger fonts / thicker lines for presentations
• summarize_workspace, describe_*   variables and their memory use as a table

Operations take an explicit Figure; passing None uses the active pyplot figure.
"""

from .errors import (
    FigtidyError,
    InvalidParameterError,
    MissingFieldError,
    NoActiveFigureError,
    NoAxesFoundError,
    NotSingleColumnError,
    UnrecognizedParameterError,
)
from .viz.layout import LayoutOptions, format_subplots
from .viz.style import StyleOptions, increase_size
from .workspace import (
    VariableDescriptor,
    describe_h5,
    describe_namespace,
    describe_npz,
    describe_value,
    print_workspace_summary,
    summarize_workspace,
)

__version__ = "0.1.0"
