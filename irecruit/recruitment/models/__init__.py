from .job_posting import JobPosting
from .application import Application
from .interview import Interview
