"""Built-in sample document — lets the pipeline run without real data."""

from klog_query.models import Record
from klog_query.parser import parse_text

DEMO_FILE_NAME = "demo.klg"

DEMO_DATA = """\
2024-01-15 (8h!)
Project Alpha kickoff #project-alpha
    8:00 - 9:30 Sprint planning #meeting
    9:45 - 12:00 Backend API development #coding
    -30m Lunch break
    13:00 - 17:00 Frontend implementation #coding

2024-01-16 (8h!)
    8:30 - 10:00 Code review #project-alpha #review
    10:15 - 12:30 Database optimization #project-beta #coding
        index tuning on the orders table
    1:30pm - 3:00pm Documentation #project-alpha #docs
    15:15 - 17:30 Bug fixing #project-beta #bugfix

2024-01-17
Working from home #location=home
    9:00 - 11:00 Feature development #project-alpha #coding
    11:15 - 12:00 Team standup #meeting
    13:00 - 16:30 API integration #project-beta #coding
    45m Testing #project-beta #testing

2024/01/18
\t8:00 - 10:30 Architecture review #project-gamma #review #meeting
\t10:45 - 12:00 Prototyping #project-gamma #coding
\t\tspike for the event store
\t13:00 - 14:30 Mentoring session #mentoring

2024-01-19 (4h!)
Short day
    9:00 - 12:00 Final testing #project-alpha #testing
    1h30m Release preparation #project-alpha #ops

2024-01-22
On call #oncall
    <23:30 - 0:45 Incident follow-up #ops
    9:00 - 12:00 New feature design #project-beta #design
    13:00 - ? Implementation #project-beta #coding

2024-02-01
    8:00 - 10:00 New month planning #meeting #planning
    10:15 - 12:00 Feature flag system #project-alpha #coding
    13:00 - 15:30 CI/CD improvements #ops #customer="ACME Corp"
    23:00 - 1:00> Deployment window #ops
"""


def demo_records() -> list[Record]:
    return parse_text(DEMO_DATA, file_name=DEMO_FILE_NAME)
