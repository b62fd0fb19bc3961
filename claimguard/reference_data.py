"""Reference datasets for ClaimGuard.

Static benchmark tables used by the category analyzers:
- CPT/HCPCS fair prices (CMS Medicare fee schedule and industry averages)
- State-average 6-month auto insurance premiums by coverage line (NAIC data)
- Questionable rental fee ceilings with the tenant-law note behind each

The tables are built once at import time and exposed as read-only mappings.
There is deliberately no utility table: utility fairness is judged against the
statement's own billing history.
"""

from types import MappingProxyType
from typing import Mapping, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class FairPrice(BaseModel):
    """Fair market price for a medical procedure code."""

    code: str = Field(..., description="CPT or HCPCS code")
    description: str = Field(..., description="Procedure description")
    fair_price: float = Field(..., description="National average fair price in USD", gt=0)

    model_config = ConfigDict(frozen=True)


class StateAverageRate(BaseModel):
    """State-average premium for an auto coverage line."""

    key: str = Field(..., description="Coverage key")
    description: str = Field(..., description="Coverage line name")
    avg_premium: float = Field(..., description="Average 6-month premium in USD", gt=0)

    model_config = ConfigDict(frozen=True)


class QuestionableFee(BaseModel):
    """Ceiling for a rental fee that is often illegal or disputable."""

    key: str = Field(..., description="Fee key")
    max_reasonable: float = Field(..., description="Maximum reasonable monthly amount", ge=0)
    legal_note: str = Field(..., description="Legal basis for disputing the fee")

    model_config = ConfigDict(frozen=True)

    @property
    def is_prohibited(self) -> bool:
        """Fees with a zero ceiling are categorically disputable."""
        return self.max_reasonable == 0


def _fair_prices(*rows) -> Mapping[str, FairPrice]:
    return MappingProxyType({
        code: FairPrice(code=code, description=description, fair_price=price)
        for code, description, price in rows
    })


def _state_rates(*rows) -> Mapping[str, StateAverageRate]:
    return MappingProxyType({
        key: StateAverageRate(key=key, description=description, avg_premium=premium)
        for key, description, premium in rows
    })


def _questionable_fees(*rows) -> Mapping[str, QuestionableFee]:
    return MappingProxyType({
        key: QuestionableFee(key=key, max_reasonable=ceiling, legal_note=note)
        for key, ceiling, note in rows
    })


FAIR_PRICE_DB: Mapping[str, FairPrice] = _fair_prices(
    # Office and emergency visits
    ("99213", "Office visit, established patient (low complexity)", 110.00),
    ("99214", "Office visit, established patient (moderate complexity)", 165.00),
    ("99215", "Office visit, established patient (high complexity)", 235.00),
    ("99283", "Emergency dept visit (moderate severity)", 290.00),
    ("99284", "Emergency dept visit (high severity)", 480.00),
    ("99285", "Emergency dept visit (life-threatening)", 710.00),
    ("99291", "Critical care, first 30-74 minutes", 475.00),
    # Labs
    ("36415", "Venipuncture (blood draw)", 12.00),
    ("85025", "Complete blood count (CBC) with differential", 11.00),
    ("85027", "Complete blood count (CBC) automated", 8.50),
    ("80053", "Comprehensive metabolic panel", 14.00),
    ("80048", "Basic metabolic panel", 11.00),
    ("80061", "Lipid panel", 18.00),
    ("81001", "Urinalysis with microscopy", 4.50),
    ("88305", "Surgical pathology, gross and microscopic", 75.00),
    # Imaging and cardiology
    ("71046", "Chest X-ray, 2 views", 45.00),
    ("71260", "CT chest with contrast", 340.00),
    ("74177", "CT abdomen and pelvis with contrast", 380.00),
    ("70553", "MRI brain with and without contrast", 520.00),
    ("73721", "MRI joint of lower extremity without contrast", 460.00),
    ("93000", "Electrocardiogram (ECG/EKG) complete", 28.00),
    ("93306", "Echocardiography, transthoracic (TTE) complete", 195.00),
    # Procedures and surgery
    ("43239", "Upper GI endoscopy with biopsy", 310.00),
    ("45380", "Colonoscopy with biopsy", 425.00),
    ("27447", "Total knee replacement", 1800.00),
    ("27130", "Total hip replacement", 1950.00),
    ("29881", "Knee arthroscopy with meniscectomy", 780.00),
    ("59400", "Routine obstetric care (vaginal delivery)", 2850.00),
    ("59510", "Routine obstetric care (cesarean delivery)", 3200.00),
    ("10060", "Incision and drainage of abscess", 195.00),
    ("11042", "Wound debridement", 145.00),
    ("96413", "Chemotherapy IV infusion, first hour", 280.00),
    ("77386", "Radiation treatment delivery (IMRT)", 360.00),
    # Behavioral health and therapy
    ("90834", "Psychotherapy, 45 minutes", 105.00),
    ("90837", "Psychotherapy, 60 minutes", 145.00),
    ("90847", "Family psychotherapy with patient", 125.00),
    ("97110", "Physical therapy, therapeutic exercises", 42.00),
    ("97140", "Manual therapy techniques", 42.00),
    ("97530", "Therapeutic activities", 45.00),
    # Injections
    ("96372", "Therapeutic injection (IM/SubQ)", 25.00),
    ("J0585", "Botulinum toxin type A injection", 450.00),
    ("J7321", "Hyaluronan injection (Hyalgan)", 280.00),
    ("20610", "Joint injection/aspiration, major joint", 110.00),
    ("64483", "Epidural injection, lumbar/sacral", 380.00),
    ("62323", "Lumbar epidural steroid injection", 350.00),
)


STATE_AVG_RATES: Mapping[str, StateAverageRate] = _state_rates(
    ("bodily_injury", "Bodily Injury Liability", 295.00),
    ("property_damage", "Property Damage Liability", 155.00),
    ("collision", "Collision Coverage", 340.00),
    ("comprehensive", "Comprehensive Coverage", 135.00),
    ("uninsured", "Uninsured/Underinsured Motorist", 72.00),
    ("medical_payments", "Medical Payments Coverage", 45.00),
    ("pip", "Personal Injury Protection", 180.00),
    ("rental", "Rental Reimbursement", 28.00),
    ("roadside", "Roadside Assistance", 18.00),
)


QUESTIONABLE_FEES: Mapping[str, QuestionableFee] = _questionable_fees(
    ("admin_fee", 0,
     "Admin/processing fees are prohibited in many states (NY, CA, IL) unless explicitly in the lease"),
    ("amenity_fee", 50,
     "Amenity fees above $50/mo may be considered unreasonable unless amenities are clearly documented"),
    ("trash_fee", 25,
     "Trash removal above $25/mo may be inflated; many jurisdictions include this in municipal services"),
    ("digital_fee", 0,
     "Digital access/portal fees are not a legitimate housing cost and are prohibited in several states"),
    ("insurance_fee", 0,
     "Charging a fee for insurance requirements (vs requiring insurance) may be an illegal surcharge"),
    ("parking_fee", 100,
     "Parking above $100/mo should be market-comparable; mandatory parking fees may violate tenant rights"),
    ("cam_fee", 150,
     "Common Area Maintenance (CAM) charges exceeding $150/mo require itemized documentation. "
     "Residential tenants may dispute non-itemized or inflated CAM fees under URLTA"),
    ("cam_reconciliation", 0,
     "CAM reconciliation adjustments without supporting documentation from the landlord are disputable. "
     "Tenants have the right to audit CAM expenses"),
)


def get_fair_price(code: str) -> Optional[FairPrice]:
    """Look up the fair price for a procedure code."""
    return FAIR_PRICE_DB.get(code)


def get_state_average(key: str) -> Optional[StateAverageRate]:
    """Look up the state-average premium for a coverage key."""
    return STATE_AVG_RATES.get(key)


def get_questionable_fee(key: str) -> Optional[QuestionableFee]:
    """Look up the ceiling for a rental fee key."""
    return QUESTIONABLE_FEES.get(key)
