from .student_report import MOCK_REPORT, StudentReport, build_prompt, calculate_age, generate_student_report

__all__ = ["MOCK_REPORT", "StudentReport", "build_prompt", "calculate_age", "generate_student_report"]
