from datetime import datetime
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

Severity = Literal["Critical", "High", "Moderate", "Low"]

Specialization = Literal[
    "General",
    "Cardiac",
    "Trauma",
    "Pediatric",
    "Neurology",
    "Orthopedic",
    "Eye",
    "Dental",
    "Maternity",
    "Oncology",
    "Emergency",
]

BloodType = Literal["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"]

# (longitude, latitude)
LonLat = Tuple[float, float]


# =========================
# HOSPITAL DIRECTORY
# =========================

class BedPool(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: int = Field(ge=0)
    available: int = Field(ge=0)

class BedAvailability(BaseModel):
    model_config = ConfigDict(frozen=True)

    general: BedPool
    icu: BedPool
    emergency: BedPool

class DoctorAvailability(BaseModel):
    model_config = ConfigDict(frozen=True)

    specialization: Specialization
    total: int = Field(ge=0)
    available: int = Field(ge=0)
    on_call: int = Field(default=0, ge=0)

class BloodStock(BaseModel):
    model_config = ConfigDict(frozen=True)

    blood_type: BloodType
    units: int = Field(ge=0)

class Hospital(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    coordinates: LonLat
    address: str = ""
    contact_number: str = ""
    primary_specialization: Specialization
    specializations: List[Specialization] = Field(default_factory=list)
    rating: float = Field(default=0.0, ge=0, le=5)
    beds: BedAvailability
    doctors: List[DoctorAvailability] = Field(default_factory=list)
    facilities: List[str] = Field(default_factory=list)
    blood_bank: List[BloodStock] = Field(default_factory=list)
    response_time: float = Field(default=0.0, ge=0)
    has_ambulance: bool = False
    has_emergency_room: bool = False
    has_24x7_service: bool = False


# =========================
# PATIENT
# =========================

class PatientData(BaseModel):
    """
    Profil pasien hasil klasifikasi gejala (dari layanan AI, di luar backend ini).
    """
    model_config = ConfigDict(frozen=True)

    symptoms: List[str] = Field(default_factory=list)
    raw_transcript: str = ""
    severity: Severity
    urgency: int = Field(ge=1, le=10)
    required_specialization: List[Specialization] = Field(default_factory=list)
    blood_type_needed: Optional[BloodType] = None
    additional_notes: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[Literal["Male", "Female", "Other"]] = None
    allergies: List[str] = Field(default_factory=list)
    current_medications: List[str] = Field(default_factory=list)


# =========================
# VITALS
# =========================

class BloodPressure(BaseModel):
    systolic: int
    diastolic: int

class VitalSigns(BaseModel):
    heart_rate: int
    blood_pressure: BloodPressure
    oxygen_saturation: int
    temperature: float
    respiratory_rate: int
    glucose_level: Optional[int] = None
    timestamp: datetime

class VitalAssessment(BaseModel):
    is_abnormal: bool
    abnormalities: List[str]


# =========================
# MATCHING
# =========================

class AvailabilityStatus(BaseModel):
    beds: bool
    doctors: bool
    blood: bool
    facilities: bool

class HospitalMatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    hospital: Hospital
    score: int
    distance: float
    eta: int
    match_reasons: List[str]
    availability_status: AvailabilityStatus
    route_source: Literal["provider", "fallback"] = "provider"

class Metrics(BaseModel):
    total_matches: int
    score_mean: float
    score_min: int
    score_max: int
    avg_distance_km: float
    avg_eta_min: float
    beds_available_ratio: float
    doctors_available_ratio: float
    blood_available_ratio: float
    fallback_routes: int

class MatchResult(BaseModel):
    count: int
    matches: List[HospitalMatch]
    metrics: Metrics

class VitalReading(BaseModel):
    vitals: VitalSigns
    assessment: VitalAssessment
    status_color: Literal["green", "yellow", "red"]
