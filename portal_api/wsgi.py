from portal_api import create_app

app = create_app()
