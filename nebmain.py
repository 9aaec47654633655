from nebfire.entrypoints import run_nebmain

if __name__ == "__main__":
    run_nebmain()
