"""
Known third-party healthcare software that practices embed on their sites.

Each entry is matched against iframe/script sources and link targets. The
table is immutable module-level data; order only matters for readability.
"""
import re
from dataclasses import dataclass
from typing import Pattern, Tuple


@dataclass(frozen=True)
class VendorSignature:
    name: str
    category: str
    pattern: Pattern[str]


def _vendor(name: str, category: str, pattern: str) -> VendorSignature:
    return VendorSignature(name=name, category=category, pattern=re.compile(pattern, re.IGNORECASE))


VENDOR_CATALOG: Tuple[VendorSignature, ...] = (
    _vendor("Epic MyChart", "Patient Portal", r"mychart|epic\.com|epiccare"),
    _vendor("Zocdoc", "Online Scheduling", r"zocdoc\.com"),
    _vendor("athenahealth", "Patient Portal", r"athenahealth\.com|athenanet|athenapatient"),
    _vendor("NextGen", "Patient Portal", r"nextgen\.com|nextmd\.com"),
    _vendor("Phreesia", "Patient Intake", r"phreesia\.(com|net)"),
    _vendor("Weave", "Patient Communication", r"getweave\.com|weavehelp"),
    _vendor("Solutionreach", "Patient Communication", r"solutionreach\.com"),
    _vendor("Luma Health", "Patient Communication", r"lumahealth\.io"),
    _vendor("IntakeQ", "Patient Intake", r"intakeq\.com"),
    _vendor("Jotform", "Online Forms", r"jotform\.(com|us)|jotfor\.ms"),
    _vendor("Tebra/Kareo", "Practice Management", r"tebra\.com|kareo\.com"),
    _vendor("eClinicalWorks/healow", "Patient Portal", r"eclinicalworks\.com|healow\.com"),
    _vendor("DrChrono", "Practice Management", r"drchrono\.com"),
    _vendor("Doxy.me", "Telehealth", r"doxy\.me"),
    _vendor("SimplePractice", "Practice Management", r"simplepractice\.com|clientsecure\.me"),
    _vendor("Klara", "Patient Communication", r"klara\.com"),
    _vendor("Podium", "Patient Communication", r"podium\.com"),
    _vendor("NexHealth", "Online Scheduling", r"nexhealth\.com"),
    _vendor("Calendly", "Online Scheduling", r"calendly\.com"),
    _vendor("Healthgrades", "Reviews & Scheduling", r"healthgrades\.com"),
    _vendor("Demandforce", "Patient Communication", r"demandforce\.com"),
    _vendor("Yosi Health", "Patient Intake", r"yosi\.health|yosicare"),
)
