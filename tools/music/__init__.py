"""
tools/music/ — Workshop tools auto-discovered by ToolRegistry.

Tools:
    calculate_hole_positions   Hole layout for one flute and tuning style
    compare_hole_styles        Same flute under every applicable style
    analyze_flute_resonance    Harmonics, nodes and per-hole tuning pull
    plan_metronome_session     Compile a practice tempo program into clicks
"""
