# src/flipforge/services/integrity_gate.py
from __future__ import annotations

from dataclasses import dataclass

from flipforge.domain.result import AnalyzeResult

LENDER_REPORT = "Lender Report"
NEGOTIATION_SCRIPT = "Negotiation Script"

SUPPRESSED_TOOLTIP = "Suppressed by Integrity Gate"


@dataclass(frozen=True)
class OutputGate:
    """
    Which institutional outputs are unlocked for one result.

    There is no setter: a locked output stays locked until a new result
    arrives and a new gate is evaluated.
    """
    lender_report: bool
    negotiation_script: bool

    @property
    def suppressed(self) -> list[str]:
        out = []
        if not self.lender_report:
            out.append(LENDER_REPORT)
        if not self.negotiation_script:
            out.append(NEGOTIATION_SCRIPT)
        return out

    @property
    def status_line(self) -> str:
        suppressed = self.suppressed
        if suppressed:
            return "Suppressed: " + " • ".join(suppressed)
        return "Outputs enabled. Proceed with caution if flagged as CONDITIONAL."


def allowed_outputs(result: AnalyzeResult) -> OutputGate:
    """
    Decide the export actions for a result.

    - `allowed_outputs` absent (legacy/manual analyze): everything enabled.
    - present: an allow-list, so a key the service left out is locked.
    """
    gate = result.allowed_outputs
    if gate is None:
        return OutputGate(lender_report=True, negotiation_script=True)
    return OutputGate(
        lender_report=bool(gate.lender_report),
        negotiation_script=bool(gate.negotiation_script),
    )
