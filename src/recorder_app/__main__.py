from recorder_app.cli import app

app()
