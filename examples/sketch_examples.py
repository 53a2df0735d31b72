'''
Some examples for bottom-k and k-partition sketches
'''

from sketchsim import (BottomKSketch, KPartitionSketch, exact_jaccard,
                       make_rng, sample_set)

n, k = 100000, 256

def eg1():
    rng = make_rng(1)
    data1 = sample_set(n, 0.2, rng)
    data2 = sample_set(n, 0.1, rng)

    m1 = BottomKSketch.from_set(data1, k)
    m2 = BottomKSketch.from_set(data2, k)
    print("Bottom-k estimated Jaccard for data1 and data2 is", m1.jaccard(m2))

    p1 = KPartitionSketch.from_set(data1, n, k)
    p2 = KPartitionSketch.from_set(data2, n, k)
    if p1.is_complete() and p2.is_complete():
        print("K-partition estimated Jaccard for data1 and data2 is", p1.jaccard(p2))

    print("Actual Jaccard for data1 and data2 is", exact_jaccard(data1, data2))

def eg2():
    # The union of two sketches is the sketch of the union.
    m1 = BottomKSketch(4, values=[1, 3, 5, 7])
    m2 = BottomKSketch(4, values=[2, 3, 6, 9])
    print("Union of bottom-4 sketches:", BottomKSketch.union(m1, m2).digest())

    p1 = KPartitionSketch(100, 5, values=[2, 25, 44, 67, 88])
    p2 = KPartitionSketch(100, 5, values=[5, 21, 41, 70, 95])
    print("Union of 5-partition sketches:", KPartitionSketch.union(p1, p2).digest())

if __name__ == "__main__":
    eg1()
    eg2()
