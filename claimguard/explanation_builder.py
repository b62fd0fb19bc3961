"""
Explanation Builder for ClaimGuard
Generates Markdown and SSML explanations for analysis results.
"""
from typing import Tuple

from .schemas import AmountUnit, FlaggedItem, SmartFeeCalculation, UnifiedAnalysisResult

# Flagged items at or above this confidence are reported as critical
CRITICAL_CONFIDENCE = 85


def severity(item: FlaggedItem) -> str:
    return "critical" if item.confidence >= CRITICAL_CONFIDENCE else "warning"


def verdict(result: UnifiedAnalysisResult) -> str:
    """ok, warning or critical, from the most severe flagged item."""
    if not result.line_items:
        return "ok"
    if any(severity(item) == "critical" for item in result.line_items):
        return "critical"
    return "warning"


def _format_excess(item: FlaggedItem) -> str:
    if item.unit == AmountUnit.UNIT_RATE:
        return f"${item.savings:.2f}/unit"
    return f"${item.savings:.2f}"


def build_explanation(result: UnifiedAnalysisResult, fee: SmartFeeCalculation) -> Tuple[str, str]:
    """
    Generate Markdown and SSML explanations for the analysis result.
    Returns (markdown, ssml)
    """
    outcome = verdict(result)

    if outcome == "ok":
        md = (
            "**Result:** ✅ No overcharges detected. Your bill appears reasonable.\n\n"
            "- **Total Billed:** ${:.2f}\n"
            "- **Potential Savings:** ${:.2f}\n"
            "- **Flagged Items:** None\n"
            "\n{}"
        ).format(result.total_billed, result.potential_savings, result.analysis_notes)
        ssml = (
            "<speak>"
            "No overcharges detected. Your bill appears reasonable. "
            "Total billed is ${:.2f}. "
            "No items were flagged."
            "</speak>"
        ).format(result.total_billed)
        return md, ssml

    items = result.line_items
    md = (
        f"**Result:** {'⚠️' if outcome == 'warning' else '🚨'} {result.dispute_type} issues detected.\n\n"
        f"- **Total Billed:** ${result.total_billed:.2f}\n"
        f"- **Fair Total:** ${result.total_fair_price:.2f}\n"
        f"- **Potential Savings:** ${result.potential_savings:.2f}\n"
        f"- **Flagged Items:** {len(items)} found\n\n"
    )
    for i, item in enumerate(items, 1):
        md += f"{i}. **{item.code}** {item.description} (Severity: {severity(item)})"
        if item.savings:
            md += f" | Excess: {_format_excess(item)}"
        md += "\n"
    md += (
        f"\n**Fee:** {fee.fee_label}, ${fee.fee:.2f}. "
        f"You keep ${fee.net_savings:.2f}.\n"
        f"\n{result.analysis_notes}"
    )

    # SSML version
    ssml = (
        f"<speak>"
        f"{len(items)} potential issue{'s' if len(items) != 1 else ''} detected. "
        f"Total billed is ${result.total_billed:.2f}. "
        f"Potential savings are ${result.potential_savings:.2f}. "
    )
    for item in items:
        ssml += f" {item.code}. Severity: {severity(item)}."
        if item.savings:
            ssml += f" Excess: {_format_excess(item)}."
    ssml += f" After the {fee.fee_label}, you keep ${fee.net_savings:.2f}. </speak>"
    return md, ssml
