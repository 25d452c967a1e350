"""
Scenario Templates.

Pre-built deterioration and recovery patterns for common clinical
situations. Each template is authored at a nominal duration and is scaled
to the session duration with :func:`scenario_from_template`.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..data.contracts import Keyframe, Scenario, Timeline
from .scaler import scale_scenario


@dataclass(frozen=True)
class ScenarioTemplate:
    """A named, authored scenario at its nominal duration."""
    template_id: str
    name: str
    description: str
    duration_minutes: float
    timeline: Timeline

    @property
    def duration_seconds(self) -> float:
        return self.duration_minutes * 60

    def to_scenario(self) -> Scenario:
        """The template as an unscaled Scenario."""
        return Scenario(
            timeline=self.timeline,
            total_duration_seconds=self.duration_seconds,
            auto_start=False,
            enabled=True,
            name=self.name,
            description=self.description,
        )


def _kf(minute: float, label: str, params: Dict[str, float],
        conditions: Dict[str, Any], rhythm: Optional[str] = None) -> Keyframe:
    return Keyframe(
        offset_seconds=minute * 60,
        label=label,
        snapshot=params,
        rhythm=rhythm,
        conditions=conditions,
    )


def _cond(st_elev: float = 0, pvc: bool = False, wide_qrs: bool = False,
          t_inv: bool = False, noise: int = 0) -> Dict[str, Any]:
    return {"stElev": st_elev, "pvc": pvc, "wideQRS": wide_qrs, "tInv": t_inv, "noise": noise}


def _vitals(hr, spo2, rr, bp_sys, bp_dia, temp, etco2) -> Dict[str, float]:
    return {"hr": hr, "spo2": spo2, "rr": rr, "bpSys": bp_sys, "bpDia": bp_dia,
            "temp": temp, "etco2": etco2}


# =============================================================================
# Template Library
# =============================================================================

SCENARIO_TEMPLATES: Dict[str, ScenarioTemplate] = {
    "septic_shock": ScenarioTemplate(
        template_id="septic_shock",
        name="Septic Shock Progression",
        description="Vasodilation leading to severe hypotension and hypoxia - late stage",
        duration_minutes=40,
        timeline=(
            _kf(0, "Early sepsis - mild tachycardia and fever",
                _vitals(95, 94, 20, 110, 70, 38.5, 35), _cond(), rhythm="NSR"),
            _kf(15, "Progressive shock - tachycardia worsens, BP drops",
                _vitals(115, 90, 26, 90, 50, 39.5, 32), _cond(noise=1)),
            _kf(30, "Severe shock - profound hypotension",
                _vitals(135, 85, 32, 70, 35, 39.5, 28), _cond(noise=2)),
            _kf(40, "Late stage - critical hypotension and hypoxia",
                _vitals(145, 80, 36, 60, 25, 39.8, 26), _cond(noise=3)),
        ),
    ),

    "stemi_progression": ScenarioTemplate(
        template_id="stemi_progression",
        name="STEMI Progression",
        description="Acute MI progressing to cardiogenic shock - late stage",
        duration_minutes=40,
        timeline=(
            _kf(0, "Initial presentation - chest pain, mild tachycardia",
                _vitals(80, 98, 16, 125, 82, 37.0, 38), _cond(), rhythm="NSR"),
            _kf(10, "STEMI develops - ST elevation appears",
                _vitals(110, 96, 22, 145, 95, 37.0, 40), _cond(st_elev=2.0)),
            _kf(25, "Worsening ischemia - PVCs appear, BP drops",
                _vitals(125, 92, 26, 100, 60, 37.0, 42), _cond(st_elev=2.5, pvc=True, noise=1)),
            _kf(40, "Late stage - cardiogenic shock develops",
                _vitals(135, 85, 28, 70, 45, 37.0, 44), _cond(st_elev=2.5, pvc=True, noise=2)),
        ),
    ),

    "hypertensive_crisis": ScenarioTemplate(
        template_id="hypertensive_crisis",
        name="Hypertensive Crisis",
        description="Rapid increase in blood pressure leading to end-organ damage",
        duration_minutes=45,
        timeline=(
            _kf(0, "Baseline - mildly elevated BP",
                _vitals(75, 99, 14, 130, 85, 37.0, 38), _cond(), rhythm="NSR"),
            _kf(15, "Hypertension worsens - tachycardia develops",
                _vitals(90, 98, 18, 180, 110, 37.0, 38), _cond()),
            _kf(30, "Crisis - very high BP, ST depression",
                _vitals(105, 96, 22, 220, 130, 37.0, 36), _cond(st_elev=-1.0)),
            _kf(45, "Extreme hypertension - risk of stroke/MI",
                _vitals(115, 95, 24, 240, 150, 37.0, 35), _cond(st_elev=-1.0, t_inv=True, noise=1)),
        ),
    ),

    "respiratory_failure": ScenarioTemplate(
        template_id="respiratory_failure",
        name="Progressive Respiratory Failure",
        description="Gradual onset of hypoxia and hypercapnia - late stage",
        duration_minutes=30,
        timeline=(
            _kf(0, "Early respiratory distress",
                _vitals(90, 93, 24, 125, 80, 37.0, 42), _cond(), rhythm="NSR"),
            _kf(10, "Worsening hypoxia - compensatory tachypnea",
                _vitals(100, 88, 32, 130, 85, 37.0, 48), _cond(noise=1)),
            _kf(20, "Severe hypoxia and hypercapnia",
                _vitals(115, 82, 36, 140, 90, 37.5, 54), _cond(noise=2)),
            _kf(30, "Late stage - severe respiratory compromise",
                _vitals(125, 78, 38, 145, 92, 37.5, 60), _cond(noise=3)),
        ),
    ),

    "post_resuscitation_recovery": ScenarioTemplate(
        template_id="post_resuscitation_recovery",
        name="Post-Resuscitation Recovery",
        description="Patient recovery after successful CPR and ROSC",
        duration_minutes=30,
        timeline=(
            _kf(0, "ROSC achieved - unstable vitals",
                _vitals(145, 75, 8, 65, 35, 35.5, 25), _cond(pvc=True, noise=3), rhythm="NSR"),
            _kf(5, "Stabilizing - oxygen improving",
                _vitals(125, 85, 14, 80, 50, 35.8, 32), _cond(pvc=True, noise=2)),
            _kf(15, "Continued improvement",
                _vitals(105, 92, 18, 95, 60, 36.2, 36), _cond(noise=1)),
            _kf(30, "Stable post-arrest state",
                _vitals(88, 96, 16, 110, 70, 36.5, 38), _cond()),
        ),
    ),

    "anaphylaxis": ScenarioTemplate(
        template_id="anaphylaxis",
        name="Anaphylactic Shock",
        description="Rapid onset of severe allergic reaction - late stage",
        duration_minutes=10,
        timeline=(
            _kf(0, "Initial exposure - mild symptoms",
                _vitals(85, 98, 16, 120, 80, 37.0, 38), _cond(), rhythm="NSR"),
            _kf(2, "Rapid onset - tachycardia, bronchospasm",
                _vitals(115, 92, 28, 100, 65, 37.0, 42), _cond(noise=2)),
            _kf(5, "Severe reaction - hypotension, hypoxia",
                _vitals(135, 85, 35, 75, 45, 37.0, 48), _cond(noise=3)),
            _kf(10, "Late stage - severe cardiovascular compromise",
                _vitals(150, 80, 36, 60, 35, 36.5, 50), _cond(pvc=True, noise=3)),
        ),
    ),
}


def list_templates() -> List[ScenarioTemplate]:
    """All built-in templates, in library order."""
    return list(SCENARIO_TEMPLATES.values())


def get_template(template_id: str) -> Optional[ScenarioTemplate]:
    """Template by id, or None if unknown."""
    return SCENARIO_TEMPLATES.get(template_id)


def create_empty_scenario(duration_minutes: float = 10) -> Scenario:
    """A single-keyframe scenario holding a healthy adult baseline."""
    return Scenario(
        timeline=(
            _kf(0, "Initial state", _vitals(80, 98, 16, 120, 80, 37.0, 38), _cond(), rhythm="NSR"),
        ),
        total_duration_seconds=duration_minutes * 60,
        auto_start=False,
        enabled=True,
    )


def scenario_from_template(template_id: str, target_minutes: Optional[float] = None) -> Scenario:
    """
    Scale a built-in template to a session duration.

    Args:
        template_id: Key in SCENARIO_TEMPLATES
        target_minutes: Session duration; defaults to the template's own

    Raises:
        KeyError: if the template does not exist
    """
    template = get_template(template_id)
    if template is None:
        raise KeyError(f"Unknown scenario template {template_id!r}")
    minutes = template.duration_minutes if target_minutes is None else target_minutes
    return scale_scenario(template.to_scenario(), minutes * 60)
