"""
Dispute Letter Generator for ClaimGuard

Renders a Markdown dispute letter and submission instructions for each bill
category. Letters are built from the fields of a UnifiedAnalysisResult only.
"""

import re
from datetime import date
from typing import Callable, Dict, List, Optional

import structlog

from .router import resolve_category
from .schemas import AmountUnit, BillCategory, FlaggedItem, UnifiedAnalysisResult

logger = structlog.get_logger(__name__)

# Premium lines above the benchmark by more than this share trigger the
# good-driver statute section
GOOD_DRIVER_HIKE_SHARE = 0.15

JUNK_FEE_RE = re.compile(
    r'connect|disconnect|activation|reactivat|service\s+charge|meter\s+set|turn.?on|hook.?up',
    re.IGNORECASE
)
PERCENT_RE = re.compile(r'(\d+)%')


def _format_date(today: date) -> str:
    return f"{today:%B} {today.day}, {today.year}"


def _money(value: float, item: Optional[FlaggedItem] = None) -> str:
    if item is not None and item.unit == AmountUnit.UNIT_RATE:
        return f"${value:.2f}/unit"
    return f"${value:.2f}"


def _item_rows(items: List[FlaggedItem]) -> str:
    return "\n".join(
        f"| {i.code} | {i.description} | {_money(i.billed_amount, i)} | "
        f"{_money(i.fair_price, i)} | {_money(i.savings, i)} |"
        for i in items
    )


def _pct_above(item: FlaggedItem) -> float:
    if item.fair_price <= 0:
        return 0.0
    return (item.billed_amount - item.fair_price) / item.fair_price


def _medical_letter(result: UnifiedAnalysisResult, today: date) -> str:
    provider = result.provider_name or "Healthcare Provider"
    rows = "\n".join(
        f"| {i.code} | {i.description} | ${i.billed_amount:.2f} | ${i.fair_price:.2f} | ${i.savings:.2f} |"
        for i in result.line_items
    )
    return f"""# Formal Billing Dispute: Itemized Overcharge Review

**Date:** {_format_date(today)}

**To:** Patient Billing Department
{provider}

**Re:** Request for Itemized Review and Adjustment of Charges

---

Dear Billing Department,

I am writing to dispute **{len(result.line_items)} charge(s)** on my statement that exceed fair market
rates published in the **CMS Medicare Physician Fee Schedule**.

## Disputed Charges

| CPT/HCPCS | Service | Billed | Fair Price | Excess |
|-----------|---------|--------|------------|--------|
{rows}

| Metric | Amount |
|--------|--------|
| **Total Billed** | ${result.total_billed:.2f} |
| **Fair Market Total** | ${result.total_fair_price:.2f} |
| **Requested Adjustment** | **${result.potential_savings:.2f}** |

## Legal Basis

1. **No Surprises Act (2022)** gives patients the right to a good-faith estimate and to dispute
   charges that substantially exceed it.
2. **Hospital Price Transparency Rule (45 CFR Part 180)** requires hospitals to publish standard
   charges for every item and service.
3. **Fair Debt Collection Practices Act** protects me from collection activity on amounts under
   active dispute.

## Requested Action

1. Provide a fully itemized bill with CPT/HCPCS codes for every charge.
2. Adjust the disputed charges to the fair market rates listed above.
3. Suspend collection activity while this dispute is reviewed.

If I do not receive a response within **30 days**, I will file a complaint with my state
Attorney General and the CMS No Surprises Help Desk.

Sincerely,

*Generated by ClaimGuard - Medical Billing Analysis Engine*
"""


def _auto_letter(result: UnifiedAnalysisResult, today: date) -> str:
    items = result.line_items
    rows = "\n".join(
        f"| {i.description} | ${i.billed_amount:.2f} | ${i.fair_price:.2f} | "
        f"+{round(_pct_above(i) * 100)}% | ${i.savings:.2f} |"
        for i in items
    )
    avg_excess = round(sum(_pct_above(i) * 100 for i in items) / len(items)) if items else 0

    hike_items = [i for i in items if _pct_above(i) > GOOD_DRIVER_HIKE_SHARE]
    good_driver = ""
    if hike_items:
        good_driver = f"""
## Good Driver & Loyalty Statute Violations

My premium has increased by more than **15%** on **{len(hike_items)} coverage line(s)** without
corresponding claims activity. This may violate:

- **CA Insurance Code §1861.02(b)**: drivers with clean records for 3+ years are entitled to a
  minimum 20% good-driver discount on liability premiums.
- **NAIC Model Act §4(7)**: prohibits unfairly discriminatory rates for policyholders with
  equivalent risk profiles.
- **State rate-justification provisions** (TX Ins. Code §2251, FL §627.062): increases above 15%
  require actuarial justification.

I have a **clean driving record** with **zero claims filed**.
"""

    return f"""# Comparative Rate Analysis: Formal Re-evaluation Request

**Date:** {_format_date(today)}

**To:** Underwriting Department
{result.provider_name or "Auto Insurance Provider"}

**Re:** Premium Exceeds Market Benchmarks

---

Dear Underwriting Department,

I am requesting a premium re-evaluation. I have benchmarked each coverage line against
**NAIC state averages**.

## Comparative Rate Analysis

| Coverage Line | My Premium | State Avg (NAIC) | % Above Market | Excess Amount |
|---------------|-----------|-------------------|----------------|---------------|
{rows}

| Metric | Amount |
|--------|--------|
| **Total Current Premium** | ${result.total_billed:.2f} |
| **Market Benchmark Total** | ${result.total_fair_price:.2f} |
| **Total Excess** | **${result.potential_savings:.2f}** |
| **Average % Above Market** | **+{avg_excess}%** |
{good_driver}
## Requested Action

1. Conduct a full rate review using my current driving record and vehicle information.
2. Provide written actuarial justification for each line that remains above the state average.
3. Apply all eligible discounts (loyalty, safe driver, low mileage, multi-policy).
4. Adjust each coverage line to within 10% of the published state average.

If I do not receive a satisfactory response within **14 business days**, I will file a rate
complaint with the State Department of Insurance and move my policy to a market-rate carrier.

Sincerely,

*Generated by ClaimGuard - Auto Insurance Analysis Engine*
"""


def _rent_letter(result: UnifiedAnalysisResult, today: date) -> str:
    items = result.line_items
    cam_items = [i for i in items if i.code.startswith("CAM")]
    notice_items = [i for i in items if i.code == "NOTICE_VIOLATION"]

    cam_section = ""
    if cam_items:
        cam_rows = "\n".join(
            f"| {i.code} | ${i.billed_amount:.2f} | ${i.fair_price:.2f} | ${i.savings:.2f} |"
            for i in cam_items
        )
        cam_section = f"""
## Common Area Maintenance (CAM) Overcharges

| Issue | Charged | Reasonable Max | Excess |
|-------|---------|----------------|--------|
{cam_rows}

Tenants are entitled to an itemized CAM breakdown and may audit CAM expenses. Reconciliation
adjustments require documented proof of actual expenditures.
"""

    notice_section = ""
    if notice_items:
        notices = "\n".join(f"- {i.description}" for i in notice_items)
        notice_section = f"""
## Notice Period Violations

{notices}

Most states require **30-60 days written notice** before a rent increase takes effect. An increase
applied without proper notice is unenforceable and I will continue paying the previous rate.
"""

    return f"""# Formal Dispute: Rental Charges

**Date:** {_format_date(today)}

**To:** {result.provider_name or "Property Management"}

**Re:** Dispute of Unauthorized Charges, CAM Overcharges and Notice Violations

---

Dear Property Management,

I am disputing **{len(items)} charge(s)** on my rental statement that I believe are unauthorized,
excessive or in violation of tenant rights law.

## All Disputed Charges

| Code | Issue | Charged | Legal Max | Excess |
|------|-------|---------|-----------|--------|
{_item_rows(items)}

**Total Disputed:** ${result.potential_savings:.2f}
{cam_section}{notice_section}
## Legal Basis

1. **California AB 2943** prohibits undisclosed junk fees.
2. **Florida SB 1592** limits arbitrary administrative or processing charges.
3. **Uniform Residential Landlord and Tenant Act (URLTA)** prohibits unconscionable rental terms.

## Requested Resolution

1. Remove all disputed fees not explicitly authorized in the lease.
2. Provide itemized CAM documentation with receipts.
3. Rescind any rent increase applied without the required notice.
4. Refund late fees charged without a grace period or above the legal cap.

If unresolved within **30 days**, I will file a complaint with the State Tenant Rights Agency
and the Consumer Financial Protection Bureau.

Sincerely,

*Generated by ClaimGuard - Tenant Rights Analysis Engine*
"""


def _utility_letter(result: UnifiedAnalysisResult, today: date) -> str:
    items = result.line_items

    est_section = ""
    est_items = [i for i in items if i.code == "EST_OVER"]
    if est_items:
        est_rows = []
        for i in est_items:
            match = PERCENT_RE.search(i.description)
            discrepancy = match.group(0) if match else "N/A"
            est_rows.append(
                f"| Estimated Period(s) | ${i.billed_amount:.2f} | ${i.fair_price:.2f} | "
                f"${i.savings:.2f} | {discrepancy} |"
            )
        est_section = f"""
## Estimated vs. Actual Readings

| Period | Billed (Estimated) | Fair Value (Actual) | Overcharge | % Discrepancy |
|--------|-------------------|---------------------|------------|---------------|
{chr(10).join(est_rows)}

Estimated readings ran consistently higher than actual meter data. Utilities must obtain actual
readings at least once every 3 billing cycles.
"""

    junk_section = ""
    junk_items = [i for i in items if JUNK_FEE_RE.search(i.description)]
    if junk_items:
        junk_rows = "\n".join(
            f"| {i.description} | ${i.billed_amount:.2f} | ${i.fair_price:.2f} | ${i.savings:.2f} |"
            for i in junk_items
        )
        junk_section = f"""
## Service Connection Fees

| Fee Description | Billed | Max Allowable | Overcharge |
|-----------------|--------|---------------|------------|
{junk_rows}

Connection and reactivation fees are capped by the utility's approved tariff.
"""

    return f"""# Formal Dispute: Utility Billing Errors

**Date:** {_format_date(today)}

**To:** Billing Department
{result.provider_name or "Utility Provider"}

**Re:** Dispute of Back-Billing, Estimated Meter Overcharges and Rate Discrepancies

---

Dear Billing Department,

I am disputing **{len(items)} billing issue(s)** on my account.

## All Disputed Items

| Issue | Description | Billed | Fair Value | Excess |
|-------|-------------|--------|------------|--------|
{_item_rows(items)}

**Total Disputed:** ${result.potential_savings:.2f}
{est_section}{junk_section}
## Legal Basis

1. **Back-billing limits**: most state utility commissions prohibit back-billing for more than
   **12 months** of estimated usage.
2. **Estimated reading standards**: when estimates exceed actual usage, the customer is entitled to
   a refund of the difference.

## Requested Resolution

1. Remove back-billing charges beyond the 12-month limit.
2. Refund the difference between estimated and actual readings.
3. Provide a complete reading history for the past 24 months.
4. Provide regulatory approval for any rate increase applied.

If unresolved within **30 days**, I will file a formal complaint with the State Public Utility
Commission.

Sincerely,

*Generated by ClaimGuard - Utility Billing Analysis Engine*
"""


LETTER_BUILDERS: Dict[BillCategory, Callable[[UnifiedAnalysisResult, date], str]] = {
    BillCategory.MEDICAL: _medical_letter,
    BillCategory.AUTO: _auto_letter,
    BillCategory.RENT: _rent_letter,
    BillCategory.UTILITY: _utility_letter,
}


def generate_appeal_by_category(result: UnifiedAnalysisResult, today: Optional[date] = None) -> str:
    """Render the dispute letter for the result's category.

    Args:
        result: Category-tagged analysis result
        today: Letter date, defaults to the current date

    Returns:
        Markdown letter
    """
    today = today or date.today()
    logger.info(
        "Generating dispute letter",
        category=result.category.value,
        items=len(result.line_items)
    )
    return LETTER_BUILDERS[result.category](result, today)


_IMPORTANT = """
### Important
- Keep copies of all correspondence
- Note dates and reference numbers
- Follow up if no response within 30 days"""


def generate_instructions_by_category(category, provider_name: Optional[str]) -> str:
    """Submission steps for a dispute letter in the given category."""
    resolved = resolve_category(category)

    if resolved == BillCategory.MEDICAL:
        provider = provider_name or "your healthcare provider"
        return f"""## How to Submit Your Dispute

### Step 1: Send to Patient Billing
- **Certified Mail** with Return Receipt to {provider}
- **Patient Portal** message to the billing office, attaching this letter
- Ask for an itemized bill if you have not received one

### Step 2: Escalate If Needed
- **Insurance Company**: file an appeal if the claim was processed
- **CMS No Surprises Help Desk**: 1-800-985-3059
- **State Attorney General**: consumer protection division
{_IMPORTANT}

*Generated by ClaimGuard - Medical Billing Analysis*
"""

    if resolved == BillCategory.AUTO:
        return f"""## How to Submit Your Re-evaluation Request

### Step 1: Send to Underwriting
- **Email** your agent and CC the underwriting department
- **Online Portal**: most insurers accept rate disputes from your account dashboard
- **Written Letter** via USPS Certified Mail for a paper trail

### Step 2: Escalate If Needed
- **State Dept. of Insurance**: file a rate complaint
- **NAIC Consumer Complaint**: naic.org/consumer
- **Switch providers**: get 3+ competitive quotes
{_IMPORTANT}

*Generated by ClaimGuard - Auto Insurance Analysis*
"""

    if resolved == BillCategory.RENT:
        provider = provider_name or "your landlord"
        return f"""## How to Submit Your Dispute

### Step 1: Send Written Notice
- **Certified Mail** with Return Receipt to {provider}
- **Email** with read receipt if your lease allows electronic communication

### Step 2: Follow Up
- Your landlord must respond within **14-30 days** depending on your state
- Document any retaliation (illegal in all 50 states)

### Step 3: Escalate If Needed
- **Local Tenant Rights Organization**: free legal advice
- **Small Claims Court**: recovery of illegal fees
{_IMPORTANT}

*Generated by ClaimGuard - Tenant Rights Analysis*
"""

    return f"""## How to Submit Your Dispute

### Step 1: Contact the Utility
- **Call** the billing department and reference your account number
- **Written Dispute** via Certified Mail

### Step 2: Request Documentation
- Ask for **all meter readings** for the disputed period
- Request the **rate schedule** showing when rates changed

### Step 3: Escalate If Needed
- **Public Utility Commission**: file a formal complaint
- **Utility Consumer Advocate**: free mediation in most states
{_IMPORTANT}

*Generated by ClaimGuard - Utility Billing Analysis*
"""
