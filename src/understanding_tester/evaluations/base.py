# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0
"""Base data list of verdict labels referenced by other submodules in this package
"""
# Python Built-Ins:
from enum import Enum


class VerdictLabel(str, Enum):
    """The outcomes a submission can be labelled with in the response panel and history"""

    UNDERSTOOD = "Understood"
    NOT_UNDERSTOOD = "Not Understood"
    ERROR = "Error"

    def __str__(self):
        return self.value

    def display(self) -> str:
        """Returns the label prettified with a status mark"""
        mark = "✔✔" if self is VerdictLabel.UNDERSTOOD else "❌"
        return f"{mark} {self.value}"
