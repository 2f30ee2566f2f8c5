"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the business rules live in the services.
"""

from src.smart_attendance.smart_attendance.access.session import Session
from src.smart_attendance.smart_attendance.container import build_container


def main():
    container = build_container(backend="memory")

    admin = container.auth_service.register("admin@example.com", "admin123", "Admin User", "admin")
    session = Session.for_account(admin)

    container.roster_service.add_student(
        session,
        {"studentId": "cs101", "name": "Alice", "faculty": "Eng", "department": "CS", "year": 1, "semester": 1},
    )
    container.attendance_service.mark_attendance(session, "CS101", "2024-05-01")
    print(container.report_service.daily_stats(session, "2024-05-01").to_dict())


if __name__ == "__main__":
    main()
