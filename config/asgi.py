"""ASGI config for the EstuArriendo project.

Exposes the ASGI callable for servers such as uvicorn. Production
deployments must set DJANGO_SETTINGS_MODULE explicitly.
"""

import os
from django.core.asgi import get_asgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.dev')

application = get_asgi_application()
