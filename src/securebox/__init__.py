from securebox.box import SecureBox
from securebox.solver import apply_toggles, open_box, open_new_box, solve_box
