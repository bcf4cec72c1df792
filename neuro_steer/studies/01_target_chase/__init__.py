"""
Study 01: Target Chase

Random brains, one target.

Questions to explore:
- Does any random brain actually approach the target?
- How often do agents end up pinned against a wall?
- What does negative speed look like in motion?
- Does moving the target change anything at all?
"""
