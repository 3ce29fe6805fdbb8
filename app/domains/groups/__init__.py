from . import api, models

router = api.router
