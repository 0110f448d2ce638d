# Sheet grader package
"""
Bubble-sheet grader

The image pipeline and grading engine live in `sheetgrader.grader` and
have no dependency on the HTTP layer.
"""
