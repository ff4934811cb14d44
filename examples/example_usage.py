"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the rules live in the services wired by the container.
"""

from src.attendx.attendx.attendance.model import Submission
from src.attendx.attendx.container import build_container
from src.attendx.attendx.geo.location import StaticLocationProvider
from src.attendx.attendx.sessions.model import CourseSelection


def main():
    container = build_container(backend="memory")
    hall = StaticLocationProvider(6.5244, 3.3792)

    session = container.session_lifecycle.start("lect-1", CourseSelection("cpe", "300", "cpe301"), hall)
    print("session", session.session_id, "key", session.session_key)

    submission = Submission(
        session_key=session.session_key.lower(),
        matric_no="ENG/21/0001",
        name="Ada Obi",
        department="cpe",
    )
    result = container.submission_validator.submit(session.session_id, submission, locator=hall, device_id="laptop-1")
    print(result.to_dict())

    for stats in container.eligibility.for_course("cpe301"):
        print(stats.to_dict())


if __name__ == "__main__":
    main()
