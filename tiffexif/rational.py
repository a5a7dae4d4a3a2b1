class Rational:
    """
    A ratio of two integers, as stored in RATIONAL and SRATIONAL fields.  A
    zero denominator is permitted; some GPS fields use it to signal an
    unmeasurable value.
    """

    def __init__(self, numerator, denominator):
        self.numerator = int(numerator)
        self.denominator = int(denominator)

    def __eq__(self, other):
        if not isinstance(other, Rational):
            return NotImplemented
        return (self.numerator == other.numerator and
                self.denominator == other.denominator)

    def __hash__(self):
        return hash((self.numerator, self.denominator))

    def __repr__(self):
        return 'Rational(%d, %d)' % (self.numerator, self.denominator)

    def __str__(self):
        return '%d/%d' % (self.numerator, self.denominator)

    def __float__(self):
        return self.numerator / self.denominator

    def toMap(self):
        return {'numerator': self.numerator, 'denominator': self.denominator}
