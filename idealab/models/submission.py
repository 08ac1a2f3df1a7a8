from idealab.extensions import db
from ._base import new_id, utcnow

class Submission(db.Model):
    __tablename__ = "submissions"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True, index=True)
    name = db.Column(db.Text, nullable=False)
    email = db.Column(db.String(320), nullable=False)
    project_name = db.Column(db.Text, nullable=False)
    project_summary = db.Column(db.Text, nullable=False)
    site_url = db.Column(db.Text, nullable=False)
    what_do_you_need = db.Column(db.Text, nullable=False, default="")
    screenshot_path = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, index=True)
