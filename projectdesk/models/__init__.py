from .user import User, Role
from .client import Client
from .project import Project, ProjectAssignment, ProjectStatus
from .comment import Comment
from .sent_email import SentEmail
