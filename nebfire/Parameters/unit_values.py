class UnitValueLib:
    def __init__(self):
        self.boltzmann_constant_eV = 8.617333262 * 10 ** (-5) # eV/K

        return
