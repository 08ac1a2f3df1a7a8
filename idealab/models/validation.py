from idealab.extensions import db
from ._base import new_id, utcnow

class Validation(db.Model):
    __tablename__ = "validations"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    # Weak reference: anonymous validations are allowed
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True, index=True)
    idea = db.Column(db.Text, nullable=False)
    target_customer = db.Column(db.Text, nullable=False)
    problem_solved = db.Column(db.Text, nullable=False)
    feedback = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, index=True)
