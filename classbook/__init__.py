"""
Classbook: modules, students, assessments and marks, managed from the terminal.
"""
