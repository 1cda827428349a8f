"""
Classification experiment on the Breast Cancer dataset.

Compares a single ID3 stump, boosted ID3 stumps and boosted scikit-learn trees
under 5-fold cross-validation, then tracks staged accuracy against the number
of boosting rounds.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from sklearn.datasets import load_breast_cancer
from sklearn.model_selection import train_test_split
from sklearn.tree import DecisionTreeClassifier

from treeboost import AdaBoost, AttributeType, Dataset, ID3, SklearnLearner, cross_validate

OUTPUT_DIR = Path(__file__).parent

# Set style
plt.style.use('seaborn-v0_8-darkgrid')


def load_dataset():
    """Load Breast Cancer dataset with labels mapped to ±1."""
    print("Loading Breast Cancer dataset...")
    data = load_breast_cancer()
    y = np.where(data.target == 0, -1, 1)
    dataset = Dataset(data.data, y, AttributeType.CONTINUOUS, name="breast-cancer")
    print(f"Dataset: {dataset!r}, class counts: {np.unique(y, return_counts=True)[1]}")
    return dataset


def experiment_learners(dataset):
    """Experiment: k-fold accuracy of single and boosted learners."""
    print("\n" + "="*60)
    print("Experiment 1: 5-fold accuracy per learner")
    print("="*60)

    learners = {
        "ID3 stump": ID3(max_depth=1),
        "AdaBoost(ID3 stump, 50, 0.3)": AdaBoost(ID3(max_depth=1), n_estimators=50, sample_proportion=0.3, random_state=42),
        "AdaBoost(sklearn depth-2, 50, 0.5)": AdaBoost(
            SklearnLearner(DecisionTreeClassifier(max_depth=2, random_state=42)),
            n_estimators=50, sample_proportion=0.5, random_state=42
        ),
    }

    results = []
    for name, learner in learners.items():
        report = cross_validate(learner, dataset, n_splits=5, random_state=23)
        results.append({
            'learner': name,
            'mean_accuracy': report.mean_accuracy,
            'std_accuracy': report.std_accuracy,
        })
        print(f"{name:40s} accuracy={report.mean_accuracy:.4f} ± {report.std_accuracy:.4f}")

    return pd.DataFrame(results)


def experiment_rounds(dataset, n_estimators=100):
    """Experiment: staged train/test accuracy against boosting rounds."""
    print("\n" + "="*60)
    print("Experiment 2: Effect of boosting rounds")
    print("="*60)

    train_idx, test_idx = train_test_split(
        np.arange(dataset.sample_count()), test_size=0.3, random_state=42,
        stratify=dataset.labels
    )
    train, test = dataset.samples(train_idx), dataset.samples(test_idx)

    model = AdaBoost(ID3(max_depth=1), n_estimators=n_estimators, sample_proportion=0.3, random_state=42).fit(train)

    results = []
    for m in range(1, n_estimators + 1):
        train_acc = np.mean(model.predict(train.features, up_to_iteration=m) == train.labels)
        test_acc = np.mean(model.predict(test.features, up_to_iteration=m) == test.labels)
        results.append({'rounds': m, 'train_accuracy': train_acc, 'test_accuracy': test_acc})
    results = pd.DataFrame(results)

    fig, axes = plt.subplots(1, 2, figsize=(12, 4))

    ax = axes[0]
    ax.plot(results['rounds'], results['train_accuracy'], label='Train')
    ax.plot(results['rounds'], results['test_accuracy'], label='Test')
    ax.set_xlabel('Boosting rounds')
    ax.set_ylabel('Accuracy')
    ax.set_title('Staged accuracy')
    ax.legend()
    ax.grid(True, alpha=0.3)

    ax = axes[1]
    ax.plot(np.arange(1, n_estimators + 1), model.alphas, label='alpha')
    ax.plot(np.arange(1, n_estimators + 1), model.errors, label='weighted error')
    ax.set_xlabel('Boosting round')
    ax.set_title('Round weights')
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(OUTPUT_DIR / 'breast_cancer_rounds.png', dpi=150)
    print("Saved plot: breast_cancer_rounds.png")

    final = results.iloc[-1]
    print(f"After {n_estimators} rounds: train={final['train_accuracy']:.4f}, test={final['test_accuracy']:.4f}")
    return results


def main():
    """Run all boosting experiments."""
    print("="*60)
    print("AdaBoost Classification Experiments")
    print("Breast Cancer Dataset")
    print("="*60)

    dataset = load_dataset()

    results_learners = experiment_learners(dataset)
    results_rounds = experiment_rounds(dataset)

    results_learners.to_csv(OUTPUT_DIR / 'breast_cancer_learners_results.csv', index=False)
    results_rounds.to_csv(OUTPUT_DIR / 'breast_cancer_rounds_results.csv', index=False)

    print("\n" + "="*60)
    print("Results Summary")
    print("="*60)
    print(results_learners.to_string(index=False))

    print("\n" + "="*60)
    print("Boosting Experiments Complete!")
    print("="*60)


if __name__ == "__main__":
    main()
