from sketchsim.cli import app

app(prog_name="sketchsim")
