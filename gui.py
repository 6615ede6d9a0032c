from __future__ import annotations
import tkinter as tk
from tkinter import ttk, messagebox

from minesolver.engine import CellState, InvalidConfiguration
from minesolver.session import GameSession, DEFAULT_WIDTH, DEFAULT_HEIGHT, DEFAULT_MINES


CELL_SIZE = 28
PADDING = 10
COLOR_MAP = {
    1: '#000099',
    2: '#009900',
    3: '#990000',
    4: '#999900',
    5: '#999999',
    6: '#003300',
    7: '#000033',
    8: '#330000',
}


class MinesweeperGUI:
    def __init__(self, root: tk.Tk):
        self.root = root
        self.root.title('minesolver')

        # Controls
        control_frame = ttk.Frame(root)
        control_frame.pack(side=tk.TOP, fill=tk.X, padx=8, pady=6)

        ttk.Label(control_frame, text='Width').grid(row=0, column=0, sticky='w')
        self.width_var = tk.IntVar(value=DEFAULT_WIDTH)
        ttk.Entry(control_frame, textvariable=self.width_var, width=4).grid(row=0, column=1)

        ttk.Label(control_frame, text='Height').grid(row=0, column=2, sticky='w')
        self.height_var = tk.IntVar(value=DEFAULT_HEIGHT)
        ttk.Entry(control_frame, textvariable=self.height_var, width=4).grid(row=0, column=3)

        ttk.Label(control_frame, text='Mines').grid(row=0, column=4, sticky='w')
        self.mines_var = tk.IntVar(value=DEFAULT_MINES)
        ttk.Entry(control_frame, textvariable=self.mines_var, width=5).grid(row=0, column=5)

        self.lightning_var = tk.BooleanVar(value=False)
        ttk.Checkbutton(control_frame, text='Lightning', variable=self.lightning_var,
                        command=self._apply_lightning).grid(row=0, column=6, padx=4)

        self.btn_new = ttk.Button(control_frame, text='New Game', command=self.new_game)
        self.btn_new.grid(row=0, column=7, padx=4)
        self.btn_ai = ttk.Button(control_frame, text='Start AI (a)', command=self.toggle_ai)
        self.btn_ai.grid(row=0, column=8, padx=4)
        self.btn_probs = ttk.Button(control_frame, text='Probabilities (d)', command=self.toggle_probabilities)
        self.btn_probs.grid(row=0, column=9, padx=4)

        # Mine counter, timer and session stats
        stats_frame = ttk.Frame(root)
        stats_frame.pack(side=tk.TOP, fill=tk.X, padx=8, pady=2)
        self.label_status = ttk.Label(stats_frame, text='')
        self.label_status.pack(side=tk.LEFT)
        self.label_stats = ttk.Label(stats_frame, text='')
        self.label_stats.pack(side=tk.RIGHT)

        self.canvas = tk.Canvas(root, bg='#000000')
        self.canvas.pack(side=tk.TOP, padx=PADDING, pady=PADDING)
        self.canvas.bind('<Button-1>', self.on_left_click)
        self.canvas.bind('<Button-3>', self.on_right_click)
        # macOS reports the secondary button as Button-2
        self.canvas.bind('<Button-2>', self.on_right_click)
        self.root.bind('<KeyPress-a>', lambda e: self.toggle_ai())
        self.root.bind('<KeyPress-d>', lambda e: self.toggle_probabilities())

        self.session: GameSession | None = None
        self.after_id = None

        self.new_game()
        self.root.protocol('WM_DELETE_WINDOW', self.on_close)

    def new_game(self):
        previous = self.session
        try:
            session = GameSession(int(self.width_var.get()), int(self.height_var.get()),
                                  int(self.mines_var.get()), lightning=self.lightning_var.get())
        except (InvalidConfiguration, tk.TclError) as e:
            messagebox.showerror('Error', str(e))
            return
        if previous is not None:
            session.stats = previous.stats
        self.session = session
        self._resize_canvas()
        self._render()
        if self.after_id is None:
            self._frame_loop()

    def _apply_lightning(self):
        if self.session is not None:
            self.session.lightning = self.lightning_var.get()

    def toggle_ai(self):
        if self.session is None or self.session.board.game_over:
            return
        running = self.session.toggle_auto_solve()
        self.btn_ai.config(text='Stop AI (a)' if running else 'Start AI (a)')
        print('[gui] AI will now solve...' if running else '[gui] AI stopped solving...')

    def toggle_probabilities(self):
        if self.session is None:
            return
        if self.session.toggle_probabilities():
            self.session.solver.recompute_probabilities()
        self._render()

    def _cell_at(self, event):
        assert self.session is not None
        x = (event.x - PADDING) // CELL_SIZE
        y = (event.y - PADDING) // CELL_SIZE
        if not self.session.board.in_bounds(x, y):
            return None
        return x, y

    def on_left_click(self, event):
        xy = self._cell_at(event)
        if xy is not None:
            self.session.click(*xy)
            self._render()

    def on_right_click(self, event):
        xy = self._cell_at(event)
        if xy is not None:
            self.session.right_click(*xy)
            self._render()

    def _resize_canvas(self):
        assert self.session is not None
        w = self.session.width * CELL_SIZE + PADDING * 2
        h = self.session.height * CELL_SIZE + PADDING * 2
        self.canvas.config(width=w, height=h)

    def _render(self):
        assert self.session is not None
        board = self.session.board
        probs = self.session.solver.probabilities
        self.canvas.delete('all')
        for y in range(board.height):
            for x in range(board.width):
                px = PADDING + x * CELL_SIZE
                py = PADDING + y * CELL_SIZE
                cx, cy = px + CELL_SIZE / 2, py + CELL_SIZE / 2
                v = board.view(x, y)
                if v.state is CellState.FLAGGED:
                    self.canvas.create_rectangle(px, py, px+CELL_SIZE, py+CELL_SIZE, fill='#cccccc', outline='#000')
                    self.canvas.create_text(cx, cy, text='🚩', font=('Arial', 12))
                elif v.state is CellState.HIDDEN:
                    self.canvas.create_rectangle(px, py, px+CELL_SIZE, py+CELL_SIZE, fill='#cccccc', outline='#000')
                elif v.state in (CellState.MINE, CellState.EXPLODED):
                    fill = '#aa1111' if v.state is CellState.EXPLODED else '#aaaaaa'
                    self.canvas.create_rectangle(px, py, px+CELL_SIZE, py+CELL_SIZE, fill=fill, outline='#000')
                    self.canvas.create_text(cx, cy, text='💣', font=('Arial', 12))
                else:
                    self.canvas.create_rectangle(px, py, px+CELL_SIZE, py+CELL_SIZE, fill='#aaaaaa', outline='#000')
                    if v.number:
                        color = COLOR_MAP.get(v.number, '#212121')
                        self.canvas.create_text(cx, cy, text=str(v.number), fill=color, font=('Helvetica', 12, 'bold'))
                if self.session.show_probabilities:
                    self.canvas.create_text(cx, cy + CELL_SIZE / 3, text=f'{probs[y, x]:g}', font=('Arial', 7))
        self._update_labels()

    def _update_labels(self):
        assert self.session is not None
        board = self.session.board
        status = f'Mines: {self.session.mines_remaining} | Time: {self.session.format_time()}'
        if board.won:
            status += ' | You won!'
        elif board.lost:
            status += ' | You lost, press New Game to restart.'
        self.label_status.config(text=status)
        stats = self.session.stats
        self.label_stats.config(text=f'Games: {stats.games} | Wins: {stats.wins} | Win%: {stats.win_rate:.3f}')
        if not self.session.auto_solve:
            self.btn_ai.config(text='Start AI (a)')

    def _frame_loop(self):
        assert self.session is not None
        delay = max(1, int(1000 / self.session.fps))
        try:
            was_over = self.session.board.game_over
            move = self.session.tick()
            if move is not None or self.session.show_probabilities:
                self._render()
            else:
                self._update_labels()
            if not was_over and self.session.board.game_over:
                self._render()
            self.after_id = self.root.after(delay, self._frame_loop)
        except Exception as e:
            self.after_id = None
            messagebox.showerror('Error', str(e))

    def on_close(self):
        if self.after_id is not None:
            self.root.after_cancel(self.after_id)
            self.after_id = None
        self.root.destroy()


def main():
    root = tk.Tk()
    app = MinesweeperGUI(root)
    root.mainloop()


if __name__ == '__main__':
    main()
