from idealab.extensions import db
from ._base import new_id, utcnow

class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    # Auth backend's user id; attached lazily on first OAuth login
    external_id = db.Column(db.String(255), unique=True, nullable=True)
    email = db.Column(db.String(320), unique=True, nullable=False)
    name = db.Column(db.String(255), nullable=False)
    avatar = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email}>"
