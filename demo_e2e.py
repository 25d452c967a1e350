"""
End-to-End Demo Script for the Scenario Timeline Engine

This script walks through the engine the way a training session uses it:
1. Range classification
2. Template scaling
3. Step-function playback
4. Live alarm session
5. Lab result flagging

Run this script to verify all modules are working correctly.
"""

import os
import sys

# Add src to path
script_dir = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.join(script_dir, 'src'))


def print_section(title: str):
    """Print a section header."""
    print("\n" + "=" * 60)
    print(f" {title}")
    print("=" * 60)


def demo_classification():
    """Demo: Range classification."""
    print_section("1. RANGE CLASSIFICATION")

    try:
        from simtimeline.classification import classify
        from simtimeline.data import ReferenceRange

        systolic = ReferenceRange(low=90, high=180, critical_high=220)
        for value in (85, 120, 200, 225):
            print(f"  SBP {value:>3} -> {classify(value, systolic).value}")

        print("✅ Classification working")
        return True

    except Exception as e:
        print(f"❌ Error: {e}")
        return False


def demo_template_scaling():
    """Demo: Scaling a template to a session duration."""
    print_section("2. TEMPLATE SCALING")

    try:
        from simtimeline.timeline import get_template, scenario_from_template

        template = get_template("septic_shock")
        scenario = scenario_from_template("septic_shock", target_minutes=8)

        print(f"Template: {template.name} ({template.duration_minutes} min)")
        for original, scaled in zip(template.timeline, scenario.timeline):
            print(f"  {original.offset_seconds:>5}s -> {scaled.offset_seconds:>4}s  {scaled.label}")

        print("✅ Scaling working")
        return True

    except Exception as e:
        print(f"❌ Error: {e}")
        return False


def demo_playback():
    """Demo: Step-function playback."""
    print_section("3. PLAYBACK")

    try:
        from simtimeline.timeline import resolve_keyframe, scenario_from_template

        scenario = scenario_from_template("anaphylaxis", target_minutes=5)
        for t in (0, 59, 60, 200, 10_000):
            kf = resolve_keyframe(scenario.timeline, t)
            print(f"  t={t:>6}s  HR={kf.snapshot['hr']:>3}  SBP={kf.snapshot['bpsys']:>3}  ({kf.label})")

        print("✅ Playback working")
        return True

    except Exception as e:
        print(f"❌ Error: {e}")
        return False


def demo_alarm_session():
    """Demo: Live alarm session driven by a manual clock."""
    print_section("4. ALARM SESSION")

    try:
        from simtimeline.data import AlarmConfig, AlarmThreshold
        from simtimeline.monitoring import AlarmSession
        from simtimeline.timeline import scenario_from_template

        now = [0.0]
        scenario = scenario_from_template("stemi_progression", target_minutes=4)
        config = AlarmConfig(thresholds={
            "hr": AlarmThreshold(enabled=True, low=50, high=120, critical_high=130),
        })
        session = AlarmSession(scenario, config, clock=lambda: now[0])
        session.subscribe(
            lambda e: print(f"  [{e.elapsed_seconds:>5.0f}s] {e.parameter}={e.value} -> {e.flag.value}")
        )
        session.start()

        for _ in range(260):
            now[0] += 1.0
            session.tick()
        session.end()

        print(f"Events emitted: {len(session.history)}")
        print("✅ Alarm session working")
        return True

    except Exception as e:
        print(f"❌ Error: {e}")
        return False


def demo_result_flags():
    """Demo: Lab result flagging."""
    print_section("5. RESULT FLAGS")

    try:
        import pandas as pd
        from simtimeline.reporting import flag_panel

        panel = pd.DataFrame({
            "analyte": ["Sodium, serum", "Potassium, serum", "Troponin I, cardiac"],
            "value": [128.0, 6.9, 0.9],
            "low": [135.0, 3.5, None],
            "high": [145.0, 5.0, 0.04],
            "critical_high": [160.0, 6.5, None],
        })
        print(flag_panel(panel)[["analyte", "value", "flag", "symbol"]].to_string(index=False))

        print("✅ Result flags working")
        return True

    except Exception as e:
        print(f"❌ Error: {e}")
        return False


def run_all_demos():
    """Run every demo and print a summary."""
    demos = [
        ("Classification", demo_classification),
        ("Template Scaling", demo_template_scaling),
        ("Playback", demo_playback),
        ("Alarm Session", demo_alarm_session),
        ("Result Flags", demo_result_flags),
    ]

    results = []
    for name, demo_fn in demos:
        try:
            success = demo_fn()
            results.append((name, success))
        except Exception as e:
            print(f"❌ {name} FAILED: {e}")
            results.append((name, False))

    # Summary
    print_section("DEMO SUMMARY")

    passed = sum(1 for _, success in results if success)
    total = len(results)

    print(f"\nResults: {passed}/{total} demos passed\n")

    for name, success in results:
        status = "✅ PASS" if success else "❌ FAIL"
        print(f"  {status}: {name}")

    print("\n" + "=" * 70)
    if passed == total:
        print(" ALL DEMOS PASSED")
    else:
        print(f" {total - passed} demo(s) failed - check implementation")
    print("=" * 70)

    return passed == total


if __name__ == '__main__':
    success = run_all_demos()
    sys.exit(0 if success else 1)
