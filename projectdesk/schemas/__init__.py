from .user import (
    UserLogin, UserOut, UserBrief, TechnicianCreate, TechnicianUpdate, TechnicianDetail,
    TechnicianResponse, TechnicianDetailResponse, TechnicianListResponse, OverdueTechnicianListResponse,
)
from .tokens import Token
from .client import (
    ClientCreate, ClientUpdate, ClientOut, ClientResponse, ClientListResponse,
    ClientProjectView, ClientProjectViewResponse,
)
from .comment import CommentCreate, CommentOut, CommentResponse
from .project import (
    ProjectCreate, ProjectUpdate, ProjectAssign, ProjectStatusUpdate, ProjectBase, ProjectOut,
    ProjectResponse, ProjectBaseResponse, ProjectListResponse, MessageResponse,
)
from .sent_email import SentEmailOut, SentEmailResponse, SentEmailListResponse
