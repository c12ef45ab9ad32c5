# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant que SQLAlchemy tente de résoudre les relations inter-modèles
# (Client.trainer référence Trainer par son nom).

from app.models.user import User  # noqa: F401
from app.models.trainer import Trainer  # noqa: F401
from app.models.client import Client  # noqa: F401
from app.models.attendance import Attendance  # noqa: F401
