from idealab.extensions import db
from ._base import new_id, utcnow

class AdminSession(db.Model):
    __tablename__ = "admin_sessions"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    expires_at = db.Column(db.DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<AdminSession id={self.id} expires_at={self.expires_at}>"
