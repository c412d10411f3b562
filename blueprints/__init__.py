"""
Blueprint registration for the campus portal.

All blueprints are registered without URL prefixes; every route carries its
full ``/api/...`` path.
"""

from __future__ import annotations


def register_blueprints(app):
    from blueprints.core import bp as core_bp
    from blueprints.accounts import bp as accounts_bp
    from blueprints.courses import bp as courses_bp
    from blueprints.academics import bp as academics_bp
    from blueprints.leave import bp as leave_bp
    from blueprints.forum import bp as forum_bp
    from blueprints.notifications import bp as notifications_bp
    from blueprints.chat import bp as chat_bp
    from blueprints.campus import bp as campus_bp
    from blueprints.gamification import bp as gamification_bp

    app.register_blueprint(core_bp)
    app.register_blueprint(accounts_bp)
    app.register_blueprint(courses_bp)
    app.register_blueprint(academics_bp)
    app.register_blueprint(leave_bp)
    app.register_blueprint(forum_bp)
    app.register_blueprint(notifications_bp)
    app.register_blueprint(chat_bp)
    app.register_blueprint(campus_bp)
    app.register_blueprint(gamification_bp)
