"""
Pages Routes - Public landing page
"""

from utils.ui_helpers import render_page
from . import pages_bp


@pages_bp.route('/')
def index():
    """Landing page - portfolio with contact form"""
    return render_page()
