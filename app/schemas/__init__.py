from app.schemas.auth import LoginIn
from app.schemas.user import CamelModel, SignupIn, UserCreate, UserOut
from app.schemas.atestado import AtestadoOut, AtestadoReview, Submitter
